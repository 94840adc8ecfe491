import csv
import getpass
import io
import logging
import shutil
import sys
from pathlib import Path

from .constants import APP_NAME, CURA_DIRECTORY_TEMPLATES
from .errors import (
    CuraDirectoryNotFoundError,
    GitNotInstalledError,
    ProcessLookupFailedError,
    ProcessTerminationError,
    UnsupportedPlatformError,
    UnsupportedVersionError,
)
from .runner import ProcessRunner

logger = logging.getLogger(APP_NAME)


class PlatformStrategy:
    """Base class defining the interface for OS-specific behavior.

    The base implementation covers POSIX systems, where processes are looked
    up with `pgrep` and terminated with `kill`.

    Attributes:
        name (str): The display name of the operating system.
    """

    name = "Unknown"

    def cura_directory(self, username: str) -> Path:
        """Returns the Cura configuration directory for `username`."""
        return Path(CURA_DIRECTORY_TEMPLATES[self.name].format(user=username))

    def find_process(self, runner: ProcessRunner, process_name: str) -> int | None:
        """Looks up a running process by name using `pgrep`.

        pgrep exits with 1 and prints nothing when no process matches, and with 0
        and one PID per line when it finds some. Anything else is unexpected.

        Args:
            runner (ProcessRunner): Executes the lookup.
            process_name (str): The process name to search for.

        Returns:
            int | None: The PID of the first match, or None if nothing runs.

        Raises:
            ProcessLookupFailedError: If pgrep behaves in any other way.
        """
        res = runner.run(["pgrep", process_name])
        if res.returncode == 1 and not res.stdout.strip() and not res.stderr.strip():
            return None
        if res.returncode == 0:
            first = res.stdout.strip().splitlines()[0] if res.stdout.strip() else ""
            try:
                return int(first)
            except ValueError:
                raise ProcessLookupFailedError(
                    f"pgrep returned no usable process id: {res.stdout!r}"
                ) from None
        raise ProcessLookupFailedError(
            f"pgrep {process_name} returned something unexpected "
            f"(status {res.returncode}): {res.stderr.strip() or res.stdout.strip()}"
        )

    def terminate_process(self, runner: ProcessRunner, pid: int) -> None:
        """Sends SIGTERM to `pid` via `kill`."""
        res = runner.run(["kill", str(pid)])
        if res.returncode != 0:
            raise ProcessTerminationError(
                f"Could not terminate process {pid}: {res.stderr.strip()}"
            )


class MacOSStrategy(PlatformStrategy):
    """Platform strategy implementation for macOS."""

    name = "MacOS"


class LinuxStrategy(PlatformStrategy):
    """Platform strategy implementation for Linux."""

    name = "Linux"


class WindowsStrategy(PlatformStrategy):
    """Platform strategy implementation for Windows (tasklist/taskkill)."""

    name = "Windows"

    def find_process(self, runner: ProcessRunner, process_name: str) -> int | None:
        image = f"{process_name}.exe"
        res = runner.run(
            ["tasklist", "/FI", f"IMAGENAME eq {image}", "/FO", "CSV", "/NH"]
        )
        if res.returncode != 0:
            raise ProcessLookupFailedError(
                f"tasklist returned something unexpected "
                f"(status {res.returncode}): {res.stderr.strip()}"
            )

        # With no match tasklist prints an INFO line instead of CSV rows.
        for row in csv.reader(io.StringIO(res.stdout)):
            if len(row) >= 2 and row[0].lower() == image.lower():
                try:
                    return int(row[1])
                except ValueError:
                    raise ProcessLookupFailedError(
                        f"tasklist returned no usable process id: {row!r}"
                    ) from None
        return None

    def terminate_process(self, runner: ProcessRunner, pid: int) -> None:
        res = runner.run(["taskkill", "/PID", str(pid)])
        if res.returncode != 0:
            raise ProcessTerminationError(
                f"Could not terminate process {pid}: {res.stderr.strip()}"
            )


def get_platform(platform: str | None = None) -> PlatformStrategy:
    """Factory function to retrieve the platform-specific strategy.

    Args:
        platform (str | None): A `sys.platform` identifier. Defaults to the
            running interpreter's.

    Returns:
        PlatformStrategy: MacOSStrategy, WindowsStrategy or LinuxStrategy.

    Raises:
        UnsupportedPlatformError: For any other operating system.
    """
    platform = sys.platform if platform is None else platform
    if platform == "darwin":
        return MacOSStrategy()
    elif platform == "win32":
        return WindowsStrategy()
    elif platform.startswith("linux"):
        return LinuxStrategy()
    raise UnsupportedPlatformError(f"Unknown operating system: {platform}")


def resolve_cura_directory(
    strategy: PlatformStrategy,
    username: str | None = None,
    override: str | None = None,
) -> Path:
    """Resolves the Cura configuration directory.

    Args:
        strategy (PlatformStrategy): The current platform.
        username (str | None): The user to resolve for. Defaults to the current
            user.
        override (str | None): An explicit directory that replaces the per-OS
            template.

    Returns:
        Path: The configuration directory (which may not exist).
    """
    if override:
        return Path(override).expanduser()
    return strategy.cura_directory(username or getpass.getuser())


def check_preconditions(cura_dir: Path, version: str) -> bool:
    """Verifies that curasync can operate on `cura_dir`.

    Each check is a fatal gate, evaluated in order: the directory exists, git
    is installed, and the supported version sub-directory is present.

    Args:
        cura_dir (Path): The Cura configuration directory.
        version (str): The version sub-directory that must exist.

    Returns:
        bool: True if the directory is already a git working copy.

    Raises:
        CuraDirectoryNotFoundError: If the directory does not exist.
        GitNotInstalledError: If git is not on PATH.
        UnsupportedVersionError: If the version sub-directory is missing.
    """
    if not cura_dir.is_dir():
        raise CuraDirectoryNotFoundError(
            f"curasync did not find a cura directory at {cura_dir}. "
            "Try running Cura and try again?"
        )

    if not shutil.which("git"):
        raise GitNotInstalledError(
            "Git is not installed on this system. Please install Git and try again."
        )

    if not (cura_dir / version).is_dir():
        raise UnsupportedVersionError(
            f"curasync did not find a cura/{version} directory. curasync only "
            f"supports {version} (you may need to upgrade curasync)."
        )

    is_initialized = (cura_dir / ".git").exists()
    logger.debug(f"Preconditions passed for {cura_dir} (initialized={is_initialized})")
    return is_initialized
