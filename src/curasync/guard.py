import logging
import time
from collections.abc import Callable

from rich.console import Console

from .constants import APP_NAME
from .errors import PreconditionDeclinedError
from .prompt import Prompter
from .runner import ProcessRunner
from .system import PlatformStrategy

console = Console()
logger = logging.getLogger(APP_NAME)


class ProcessGuard:
    """Keeps Cura from writing to its configuration while curasync changes it.

    This is a best-effort convention: the user is asked to let curasync stop
    Cura, then a grace period gives the OS time to release file handles.

    Attributes:
        strategy (PlatformStrategy): Looks up and terminates processes.
        runner (ProcessRunner): Executes the lookup and kill commands.
        prompter (Prompter): Asks for the user's consent.
        process_name (str): The Cura process name.
        grace_period (float): Seconds to wait after terminating Cura.
    """

    def __init__(
        self,
        strategy: PlatformStrategy,
        runner: ProcessRunner,
        prompter: Prompter,
        process_name: str,
        grace_period: float,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.strategy = strategy
        self.runner = runner
        self.prompter = prompter
        self.process_name = process_name
        self.grace_period = grace_period
        self._sleep = sleep

    def find_companion_process(self) -> int | None:
        """Returns the PID of the running Cura process, or None."""
        pid = self.strategy.find_process(self.runner, self.process_name)
        if pid is not None:
            logger.info(f"{self.process_name} is running (pid {pid})")
        return pid

    def terminate(self, pid: int) -> None:
        """Terminates `pid` and waits for the grace period."""
        logger.info(f"Terminating {self.process_name} (pid {pid})")
        self.strategy.terminate_process(self.runner, pid)
        if self.grace_period > 0:
            self._sleep(self.grace_period)

    def confirm_and_terminate(self, required: bool = True) -> bool:
        """Offers to stop Cura if it is running.

        Args:
            required (bool, optional):  Whether the calling command must abort
                                        when the user declines. Defaults to True.

        Returns:
            bool: True if Cura is not running (anymore), False if the user
            declined and `required` is False.

        Raises:
            PreconditionDeclinedError: If the user declines and `required` is True.
        """
        pid = self.find_companion_process()
        if pid is None:
            return True

        if required:
            question = (
                "Cura is running. To proceed safely, you need to exit out of cura. "
                "Kill cura?"
            )
        else:
            question = (
                "Cura is running and may only save its settings on exit. "
                "Kill cura before pushing?"
            )

        if not self.prompter.confirm(question, default=True):
            if required:
                raise PreconditionDeclinedError(
                    "Cura must be closed before continuing. Aborted."
                )
            logger.info(f"Continuing while {self.process_name} is running")
            console.print(
                "[bold yellow]WARNING:[/bold yellow] Continuing while Cura is "
                "running; unsaved settings will not be included."
            )
            return False

        self.terminate(pid)
        console.print("[dim]Cura has been stopped.[/dim]")
        return True
