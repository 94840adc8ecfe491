import logging
from dataclasses import dataclass
from pathlib import Path

from .config import Config
from .constants import APP_NAME
from .git_wrapper import GitRepo
from .guard import ProcessGuard
from .prompt import Prompter, TerminalPrompter
from .runner import ProcessRunner
from .system import (
    PlatformStrategy,
    check_preconditions,
    get_platform,
    resolve_cura_directory,
)

logger = logging.getLogger(APP_NAME)


@dataclass(frozen=True)
class SyncContext:
    """Everything an operation needs, resolved once at startup.

    Attributes:
        platform (PlatformStrategy): The current operating system.
        cura_dir (Path): The Cura configuration directory.
        is_initialized (bool): Whether `cura_dir` was a git working copy at startup.
        config (Config): The loaded configuration.
        runner (ProcessRunner): Executes external commands.
        prompter (Prompter): Asks the user questions.
        guard (ProcessGuard): Checks for a running Cura.
    """

    platform: PlatformStrategy
    cura_dir: Path
    is_initialized: bool
    config: Config
    runner: ProcessRunner
    prompter: Prompter
    guard: ProcessGuard

    @property
    def repo(self) -> GitRepo:
        """A git handle bound to the Cura directory."""
        return GitRepo(self.cura_dir, self.runner)


def build_context(
    config: Config,
    runner: ProcessRunner | None = None,
    prompter: Prompter | None = None,
    platform: str | None = None,
    username: str | None = None,
) -> SyncContext:
    """Resolves the platform and checks preconditions.

    Args:
        config (Config): The loaded configuration.
        runner (ProcessRunner | None): Defaults to a real ProcessRunner.
        prompter (Prompter | None): Defaults to a TerminalPrompter.
        platform (str | None): A `sys.platform` value. Defaults to the host's.
        username (str | None): Defaults to the current user.

    Returns:
        SyncContext: The context passed to every operation.

    Raises:
        FatalError: If any precondition fails.
    """
    runner = runner or ProcessRunner()
    prompter = prompter or TerminalPrompter()

    strategy = get_platform(platform)
    cura_dir = resolve_cura_directory(strategy, username, config.cura.directory)
    logger.debug(f"Resolved {strategy.name} cura directory: {cura_dir}")
    is_initialized = check_preconditions(cura_dir, config.cura.version)

    guard = ProcessGuard(
        strategy,
        runner,
        prompter,
        process_name=config.cura.process_name,
        grace_period=config.guard.grace_period,
    )
    return SyncContext(
        platform=strategy,
        cura_dir=cura_dir,
        is_initialized=is_initialized,
        config=config,
        runner=runner,
        prompter=prompter,
        guard=guard,
    )
