import logging
import shutil
from pathlib import Path

from .constants import APP_NAME
from .errors import GitCommandError
from .runner import ProcessRunner

logger = logging.getLogger(APP_NAME)


class GitRepo:
    """A wrapper around the Git command-line interface for the Cura directory.

    Unlike a plain repository handle, the directory does not have to be a
    working copy yet: `init` and `clone` are issued through the same object.

    Attributes:
        path (Path): The file system path of the working copy.
        runner (ProcessRunner): Executes the git commands.
    """

    def __init__(self, path: Path, runner: ProcessRunner):
        """Initializes the GitRepo instance.

        Args:
            path (Path): The directory git operates in.
            runner (ProcessRunner): The process runner used for every invocation.
        """
        self.path = path
        self.runner = runner

    def _run(self, args: list[str], capture: bool = True) -> str:
        """Executes a Git command within the repository directory.

        Args:
            args (list[str]): A list of arguments to pass to the git command.
            capture (bool, optional):   Whether to capture and return stdout.
                                        Streamed commands write directly to the
                                        terminal. Defaults to True.

        Returns:
            str:    The stripped stdout of the command if capture is True,
                    otherwise an empty string.

        Raises:
            GitCommandError: If the git command returns a non-zero exit code.
        """
        res = self.runner.run(["git", *args], cwd=self.path, capture=capture)
        if res.returncode != 0:
            raise GitCommandError(args, res.returncode, res.stderr)
        return res.stdout.strip() if capture else ""

    def is_initialized(self) -> bool:
        """Returns True if the directory holds its own git metadata."""
        return (self.path / ".git").exists()

    def remove_metadata(self) -> None:
        """Deletes the `.git` directory, discarding all history."""
        git_dir = self.path / ".git"
        if git_dir.is_dir():
            logger.info(f"Removing existing git metadata at {git_dir}")
            shutil.rmtree(git_dir)
        elif git_dir.exists():
            # A gitfile pointing at a separate git dir.
            git_dir.unlink()

    def init(self, branch: str) -> None:
        """Creates a new repository whose first branch is `branch`."""
        self._run(["init", f"--initial-branch={branch}"], capture=False)

    def remote_add(self, name: str, url: str) -> None:
        """Registers a remote."""
        self._run(["remote", "add", name, url], capture=False)

    def add_all(self) -> None:
        """
        Stages all changes (modified, deleted, and untracked files)
        in the working directory.
        """
        self._run(["add", "."], capture=False)

    def commit(self, message: str) -> None:
        """Creates a new commit with the provided message.

        Args:
            message (str): The commit message.
        """
        self._run(["commit", "-m", message], capture=False)

    def push(
        self,
        remote: str | None = None,
        branch: str | None = None,
        set_upstream: bool = False,
    ) -> None:
        """Pushes to a remote, streaming git's progress to the terminal.

        Without a remote and branch this pushes to the configured upstream.

        Args:
            remote (str | None, optional): The remote name. Defaults to None.
            branch (str | None, optional): The branch to push. Defaults to None.
            set_upstream (bool, optional):  Whether to record the branch as the
                                            upstream (`-u`). Defaults to False.
        """
        cmd = ["push"]
        if set_upstream:
            cmd.append("-u")
        if remote:
            cmd.append(remote)
        if branch:
            cmd.append(branch)
        self._run(cmd, capture=False)

    def pull(self) -> None:
        """Pulls from the configured upstream, streaming git's output."""
        self._run(["pull"], capture=False)

    def clone_into(self, url: str) -> None:
        """Clones `url` into the (empty) repository directory itself."""
        self._run(["clone", url, "."], capture=False)

    def status_porcelain(self) -> list[str]:
        """Returns the porcelain (machine-readable) status of the working copy.

        Untracked files that are not ignored count as changes.

        Returns:
            list[str]: A list of status lines returned by `git status --porcelain`.
        """
        output = self._run(["status", "--porcelain"])
        return output.splitlines() if output else []

    def show_staged_stat(self) -> None:
        """Prints a per-file summary of the staged changes to the terminal."""
        self._run(["diff", "--cached", "--stat"], capture=False)
