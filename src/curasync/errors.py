"""Exception hierarchy for curasync.

Two tiers are distinguished by the dispatcher:

* `FatalError`: an unrecoverable precondition (missing Cura directory, missing
  git, unsupported OS, unexpected process lookup output).
* `UserFacingError`: an expected outcome of user input (bad URL, declined
  confirmation, nothing to push).

`GitCommandError` wraps a failed git invocation and carries its exit code so the
dispatcher can propagate it.
"""


class CurasyncError(Exception):
    """Base class for all curasync errors."""


class FatalError(CurasyncError):
    """An unrecoverable condition; the process stops before doing anything else."""


class UnsupportedPlatformError(FatalError):
    pass


class CuraDirectoryNotFoundError(FatalError):
    pass


class GitNotInstalledError(FatalError):
    pass


class UnsupportedVersionError(FatalError):
    pass


class ProcessLookupFailedError(FatalError):
    """The process lookup tool behaved in an unexpected way."""


class ProcessTerminationError(FatalError):
    pass


class CommandNotFoundError(FatalError):
    """An external executable could not be started."""


class UserFacingError(CurasyncError):
    """An expected failure reported with a short message and exit code 1."""


class UsageError(UserFacingError):
    """The command line could not be parsed."""


class InvalidUrlError(UserFacingError):
    pass


class PreconditionDeclinedError(UserFacingError):
    """The user declined a confirmation that the current command requires."""


class NothingToPushError(UserFacingError):
    pass


class NotInitializedError(UserFacingError):
    pass


class GitCommandError(CurasyncError):
    """A git invocation exited with a non-zero status.

    Attributes:
        args_list (list[str]): The arguments passed to git.
        returncode (int): The exit status of the git process.
        stderr (str): Captured error output, empty for streamed commands.
    """

    def __init__(self, args_list: list[str], returncode: int, stderr: str = ""):
        self.args_list = args_list
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(
            f"git {' '.join(args_list)} exited with status {returncode}{detail}"
        )
