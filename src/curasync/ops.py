import logging
import re
import time
from pathlib import Path
from urllib.parse import urlparse

from rich.console import Console

from .constants import APP_NAME, BACKUP_PREFIX, default_ignores
from .context import SyncContext
from .errors import (
    GitCommandError,
    InvalidUrlError,
    NothingToPushError,
    NotInitializedError,
    PreconditionDeclinedError,
)

console = Console()
logger = logging.getLogger(APP_NAME)

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*$")
_SCP_LIKE = re.compile(r"^[\w.+-]+@[\w.-]+:(?!//)\S+$")


def is_valid_url(url: str | None) -> bool:
    """Checks that `url` is a well-formed git remote.

    Accepts `scheme://host/path` URLs, `file://` URLs with a path, and the
    scp-like `user@host:path` form git understands for SSH.

    Args:
        url (str | None): The candidate remote.

    Returns:
        bool: True if the URL is well-formed.
    """
    if not url or any(c.isspace() for c in url):
        return False
    if _SCP_LIKE.match(url):
        return True
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if not _SCHEME.match(parsed.scheme):
        return False
    if parsed.scheme == "file":
        return bool(parsed.path)
    return bool(parsed.netloc)


def get_backup_path(cura_dir: Path) -> Path:
    """Returns the sibling path `clone` moves the current configuration to.

    Args:
        cura_dir (Path): The Cura configuration directory.

    Returns:
        Path: `<parent>/cura_backup_<epoch milliseconds>`.
    """
    return cura_dir.parent / f"{BACKUP_PREFIX}{int(time.time() * 1000)}"


def write_gitignore(cura_dir: Path, version: str) -> Path:
    """Writes the curasync ignore list into the Cura directory.

    Args:
        cura_dir (Path): The Cura configuration directory.
        version (str): The Cura version sub-directory.

    Returns:
        Path: The path of the written file.
    """
    gitignore = cura_dir / ".gitignore"
    with open(gitignore, "w") as f:
        f.write("\n".join(default_ignores(version)) + "\n")
    return gitignore


def _require_initialized(ctx: SyncContext) -> None:
    if not ctx.is_initialized:
        raise NotInitializedError(
            f"{ctx.cura_dir} is not a git repository yet. "
            "Run 'curasync init <url>' or 'curasync clone <url>' first."
        )


def initialize(ctx: SyncContext, url: str | None = None) -> None:
    """Turns the Cura directory into a repository and pushes it to `url`.

    The `.gitignore` is written after the push, so it is not part of the
    initial commit. Every git step is fatal; earlier steps are not rolled back.

    Args:
        ctx (SyncContext): The startup context.
        url (str | None): The remote URL. Asked for interactively if None.

    Raises:
        PreconditionDeclinedError: If the user declines any confirmation.
        InvalidUrlError: If the URL is malformed.
        GitCommandError: If any git step fails.
    """
    proceed = ctx.prompter.confirm(
        "This command will turn your cura configuration folder into a git repo "
        "and push it into a blank repository. Use this if you want to share your "
        "config with others. Proceed?",
        default=False,
    )
    if not proceed:
        raise PreconditionDeclinedError("Aborted.")

    ctx.guard.confirm_and_terminate()

    if ctx.is_initialized:
        console.print(
            "[bold yellow]WARNING:[/bold yellow] Looks like the cura folder is "
            "already initialized."
        )
        overwrite = ctx.prompter.confirm(
            "Discard the existing git history and start over?", default=False
        )
        if not overwrite:
            raise PreconditionDeclinedError("Aborted. Existing repository kept.")

    if url is None:
        url = ctx.prompter.ask("Enter a git repo origin")

    if not is_valid_url(url):
        raise InvalidUrlError(f"Invalid URL: '{url}'. Please provide a valid URL.")

    core = ctx.config.core
    repo = ctx.repo
    logger.info(f"Initializing {ctx.cura_dir} with remote {url}")

    console.print("[bold blue]INIT:[/bold blue] Creating repository...")
    repo.remove_metadata()
    repo.init(core.branch)
    repo.remote_add(core.remote_name, url)

    console.print("[bold blue]INIT:[/bold blue] Creating initial commit...")
    repo.add_all()
    repo.commit(f"{core.commit_tag} init")

    console.print(f"[bold blue]PUSH:[/bold blue] Pushing to {core.remote_name}...")
    repo.push(core.remote_name, core.branch, set_upstream=True)

    write_gitignore(ctx.cura_dir, ctx.config.cura.version)
    console.print("[bold green]SUCCESS:[/bold green] curasync initialized.")


def clone(ctx: SyncContext, url: str | None) -> None:
    """Replaces the Cura configuration with a clone of `url`.

    The current directory is renamed to a timestamped sibling before cloning.
    If the clone fails, nothing is restored: the backup stays where it is and
    the Cura directory is left empty.

    Args:
        ctx (SyncContext): The startup context.
        url (str | None): The remote URL.

    Raises:
        InvalidUrlError: If the URL is missing or malformed.
        PreconditionDeclinedError: If the user declines any confirmation.
        GitCommandError: If the clone fails.
    """
    if not url:
        raise InvalidUrlError("No URL provided for clone operation.")
    if not is_valid_url(url):
        raise InvalidUrlError(f"Invalid URL provided for clone operation: '{url}'.")

    proceed = ctx.prompter.confirm(
        "This will clone the configuration from a given, existing repo into your "
        "cura directory. (Your current configuration will be backed up). Proceed?",
        default=False,
    )
    if not proceed:
        raise PreconditionDeclinedError("Aborted.")

    ctx.guard.confirm_and_terminate()

    backup = get_backup_path(ctx.cura_dir)
    console.print(
        "[bold blue]BACKUP:[/bold blue] Backing up your current cura configuration..."
    )
    ctx.cura_dir.rename(backup)
    logger.info(f"Moved {ctx.cura_dir} to {backup}")
    console.print(f"   Backed up to [cyan]{backup}[/cyan]")

    ctx.cura_dir.mkdir()

    console.print(f"[bold blue]CLONE:[/bold blue] Cloning from {url}...")
    try:
        ctx.repo.clone_into(url)
    except GitCommandError:
        logger.error(f"Clone of {url} failed; backup left at {backup}")
        console.print(
            f"[bold red]ERROR:[/bold red] Clone failed. Your previous configuration "
            f"is still at [cyan]{backup}[/cyan]."
        )
        raise

    console.print(
        "[bold green]SUCCESS:[/bold green] Clone completed. Try opening cura."
    )


def pull(ctx: SyncContext) -> None:
    """Pulls configuration changes from the upstream branch."""
    _require_initialized(ctx)
    console.print("Pulling config from origin...")
    ctx.repo.pull()
    console.print("[bold green]SUCCESS:[/bold green] Pulled config from origin.")


def push(ctx: SyncContext) -> None:
    """Commits local configuration changes and pushes them upstream.

    Cura may only write its settings on exit, so the user is offered to stop
    it first; declining is allowed.

    Args:
        ctx (SyncContext): The startup context.

    Raises:
        NotInitializedError: If the Cura directory is not a repository.
        NothingToPushError: If the working copy matches the last commit.
        GitCommandError: If committing or pushing fails.
    """
    _require_initialized(ctx)
    ctx.guard.confirm_and_terminate(required=False)

    repo = ctx.repo
    if not repo.status_porcelain():
        raise NothingToPushError(
            "Nothing to push: your cura configuration matches the last commit."
        )

    repo.add_all()
    console.print("[bold]Changes to be pushed:[/bold]")
    repo.show_staged_stat()

    message = ctx.prompter.ask("Describe your changes (commit message)")
    repo.commit(f"{ctx.config.core.commit_tag} {message}")

    console.print("[bold blue]PUSH:[/bold blue] Pushing config to origin...")
    repo.push()
    console.print("[bold green]SUCCESS:[/bold green] Pushed config to origin.")


def print_directory(ctx: SyncContext) -> None:
    """Prints the resolved Cura directory and nothing else."""
    console.print(
        str(ctx.cura_dir),
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )
