import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import NoReturn

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from . import ops
from .config import Config
from .constants import APP_NAME, LOG_FILE
from .context import SyncContext, build_context
from .errors import FatalError, GitCommandError, UsageError, UserFacingError

logger = logging.getLogger(APP_NAME)
console = Console()
err_console = Console(stderr=True)

COMMANDS = [
    ("help", "print help screen"),
    ("init <url>", "initialize curasync in your cura folder and push it to <url>"),
    ("clone <url>", "replace your cura folder with the config stored at <url>"),
    ("pull", "grab changes from remote"),
    ("push", "commit local changes and push them to remote"),
    ("cwd", "print the cura directory"),
]


def setup_logging(config: Config | None = None) -> None:
    """Configures the logging subsystem.

    Records go to a rotating log file; the terminal is reserved for the rich
    console. If the log file cannot be opened, warnings fall back to stderr.
    Calling it again with a loaded config only applies the new size limit.

    Args:
        config (Config | None): Supplies the log size limit. Defaults are used
            when None.
    """
    config = config or Config()
    if logger.handlers:
        for handler in logger.handlers:
            if isinstance(handler, RotatingFileHandler):
                handler.maxBytes = config.limits.max_log_size
        return

    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )

    try:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=config.limits.max_log_size,
            backupCount=5,
        )
    except OSError as e:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(logging.WARNING)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)
        logger.warning(f"Could not open log file {LOG_FILE}: {e}")
        return
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


class ArgumentParser(argparse.ArgumentParser):
    """Raises `UsageError` instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Builds the argument parser.

    Subcommands are parsed as plain positionals so an unknown command is
    reported by curasync itself rather than rejected by argparse.
    """
    epilog = "commands:\n" + "\n".join(
        f"  {name:<14}{description}" for name, description in COMMANDS
    )
    parser = ArgumentParser(
        prog=APP_NAME,
        usage=f"{APP_NAME} [help|init <url>|clone <url>|pull|push|cwd]",
        description="Sync your Cura configuration with a git repository.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", nargs="?", help=argparse.SUPPRESS)
    parser.add_argument("url", nargs="?", help=argparse.SUPPRESS)
    return parser


def show_banner(ctx: SyncContext) -> None:
    """Prints the detected OS, the Cura directory and the repository state."""
    state = "[green]yes[/green]" if ctx.is_initialized else "[yellow]no[/yellow]"
    console.print(
        Panel(
            f"[bold]OS:[/bold]             {ctx.platform.name}\n"
            f"[bold]Cura Directory:[/bold] {escape(str(ctx.cura_dir))}\n"
            f"[bold]Initialized:[/bold]    {state}",
            title=APP_NAME,
            border_style="blue",
            expand=False,
        )
    )


def dispatch(
    ctx: SyncContext,
    parser: argparse.ArgumentParser,
    command: str | None,
    url: str | None,
) -> int:
    """Runs one subcommand and returns the process exit code."""
    if command is None:
        show_banner(ctx)
        parser.print_help()
        return 0
    elif command == "help":
        parser.print_help()
        return 0
    elif command == "init":
        ops.initialize(ctx, url)
        return 0
    elif command == "clone":
        ops.clone(ctx, url)
        return 0
    elif command == "pull":
        ops.pull(ctx)
        return 0
    elif command == "push":
        ops.push(ctx)
        return 0
    elif command == "cwd":
        ops.print_directory(ctx)
        return 0

    err_console.print(f"unrecognized command {escape(command)}", style="red")
    parser.print_help()
    return 1


def run(argv: list[str] | None = None, ctx: SyncContext | None = None) -> int:
    """Parses `argv`, builds the context and runs one subcommand.

    Args:
        argv (list[str] | None): Command-line arguments without the program
            name. Defaults to `sys.argv[1:]`.
        ctx (SyncContext | None): A prebuilt context. If None, the platform and
            preconditions are resolved here.

    Returns:
        int: The process exit code.
    """
    parser = build_parser()
    try:
        args, extra = parser.parse_known_args(argv)
        if extra:
            parser.error(f"unrecognized arguments: {' '.join(extra)}")
    except UsageError as e:
        err_console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        parser.print_help()
        return 1

    try:
        if ctx is None:
            setup_logging()
            config = Config.load()
            setup_logging(config)
            ctx = build_context(config)
        return dispatch(ctx, parser, args.command, args.url)
    except KeyboardInterrupt:
        logger.info(f"{args.command} interrupted")
        err_console.print("\n[bold red]Aborted.[/bold red]")
        return 1
    except FatalError as e:
        logger.critical(f"{type(e).__name__}: {e}")
        err_console.print(f"[bold red]FATAL:[/bold red] {escape(str(e))}")
        return 1
    except UserFacingError as e:
        logger.info(f"{args.command} stopped: {e}")
        err_console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        return 1
    except GitCommandError as e:
        logger.error(str(e))
        err_console.print(f"[bold red]ERROR:[/bold red] {escape(str(e))}")
        return e.returncode


def main() -> None:
    """Main entry point for the curasync CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
