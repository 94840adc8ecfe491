"""Interactive terminal prompts.

Operations receive a `Prompter` so tests can inject scripted answers instead of
reading from the terminal.
"""

from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.text import TextType

from .errors import PreconditionDeclinedError

console = Console()

_CONFIRM_HINTS = {True: "(Y/n)", False: "(y/N)", None: "(y/n)"}


class Prompter:
    """Interface for asking the user questions."""

    def confirm(self, question: str, default: bool | None = None) -> bool:
        """Asks a yes/no question.

        Args:
            question (str): The question to display.
            default (bool | None): The answer used for empty input. If None,
                empty input repeats the question.

        Returns:
            bool: True for "y", False for "n".
        """
        raise NotImplementedError

    def ask(self, question: str, default: str | None = None) -> str:
        """Asks a free-text question.

        Args:
            question (str): The question to display.
            default (str | None): The answer used for empty input. If None,
                empty input repeats the question.

        Returns:
            str: The raw answer, or the default.
        """
        raise NotImplementedError


class _YesNo(Confirm):
    """A y/n prompt that trims the answer before checking it."""

    prompt_suffix = " "

    @classmethod
    def get_input(
        cls,
        console: Console,
        prompt: TextType,
        password: bool,
        stream: TextIO | None = None,
    ) -> str:
        return super().get_input(console, prompt, password, stream=stream).strip()


class _FreeText(Prompt):
    prompt_suffix = " "


class TerminalPrompter(Prompter):
    """Prompts on the terminal, blocking until a valid answer is given.

    Closing stdin or pressing Ctrl-C at a prompt aborts the current command.
    """

    def confirm(self, question: str, default: bool | None = None) -> bool:
        prompt = f"{escape(question)} {_CONFIRM_HINTS[default]}"
        kwargs = {} if default is None else {"default": default}
        try:
            return _YesNo.ask(
                prompt,
                console=console,
                show_default=False,
                show_choices=False,
                **kwargs,
            )
        except (EOFError, KeyboardInterrupt):
            console.print()
            raise PreconditionDeclinedError("Aborted.") from None

    def ask(self, question: str, default: str | None = None) -> str:
        kwargs = {} if default is None else {"default": default}
        try:
            while True:
                answer = _FreeText.ask(escape(question), console=console, **kwargs)
                if answer != "" or default is not None:
                    return answer
        except (EOFError, KeyboardInterrupt):
            console.print()
            raise PreconditionDeclinedError("Aborted.") from None
