import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .constants import APP_NAME
from .errors import CommandNotFoundError

logger = logging.getLogger(APP_NAME)


@dataclass(frozen=True)
class CommandResult:
    """The outcome of an external command.

    Attributes:
        returncode (int): The exit status.
        stdout (str): Captured standard output (empty when output was inherited).
        stderr (str): Captured standard error (empty when output was inherited).
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""


class ProcessRunner:
    """Runs external commands.

    This is the only place curasync starts subprocesses, so tests can replace
    it with a scripted fake instead of invoking git, pgrep or kill.
    """

    def run(
        self, args: Sequence[str], cwd: Path | None = None, capture: bool = True
    ) -> CommandResult:
        """Executes a command and returns its exit status.

        Args:
            args (Sequence[str]): The executable followed by its arguments.
            cwd (Path | None, optional): Working directory. Defaults to None.
            capture (bool, optional):   Whether to capture stdout/stderr. When
                                        False the command inherits the terminal,
                                        so its progress and errors are visible
                                        to the user. Defaults to True.

        Returns:
            CommandResult: The exit status and any captured output.

        Raises:
            CommandNotFoundError: If the executable cannot be found.
        """
        cmd = list(args)
        logger.debug(f"Running {cmd} (cwd={cwd}, capture={capture})")
        try:
            res = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=capture,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(f"Could not run '{cmd[0]}': {e}") from e

        if res.returncode != 0:
            logger.info(f"{cmd[0]} exited with status {res.returncode}")
        return CommandResult(
            returncode=res.returncode,
            stdout=res.stdout or "",
            stderr=res.stderr or "",
        )
