"""Scripted stand-ins for the process runner and the terminal prompter."""

from collections.abc import Callable, Sequence
from pathlib import Path

from curasync.prompt import Prompter
from curasync.runner import CommandResult, ProcessRunner

Response = CommandResult | Callable[[list[str], Path | None], CommandResult]


class FakeRunner(ProcessRunner):
    """Records every command and answers from a table of prefixes.

    Unmatched commands succeed with no output, except `pgrep`, which reports
    that nothing is running.
    """

    def __init__(self, responses: dict[tuple[str, ...], Response] | None = None):
        self.responses = responses or {}
        self.invocations: list[tuple[list[str], Path | None, bool]] = []

    @property
    def calls(self) -> list[list[str]]:
        return [args for args, _, _ in self.invocations]

    def git_calls(self) -> list[list[str]]:
        return [args for args in self.calls if args[0] == "git"]

    def run(
        self, args: Sequence[str], cwd: Path | None = None, capture: bool = True
    ) -> CommandResult:
        cmd = list(args)
        self.invocations.append((cmd, cwd, capture))

        for prefix in sorted(self.responses, key=len, reverse=True):
            if tuple(cmd[: len(prefix)]) == prefix:
                response = self.responses[prefix]
                if callable(response):
                    return response(cmd, cwd)
                return response

        if cmd[0] == "pgrep":
            return CommandResult(returncode=1)
        return CommandResult(returncode=0)


class FakePrompter(Prompter):
    """Answers questions from scripted lists; an unexpected question fails the test."""

    def __init__(self, confirms: Sequence[bool] = (), answers: Sequence[str] = ()):
        self.confirms = list(confirms)
        self.answers = list(answers)
        self.questions: list[str] = []

    def confirm(self, question: str, default: bool | None = None) -> bool:
        self.questions.append(question)
        if not self.confirms:
            raise AssertionError(f"Unexpected confirmation: {question}")
        return self.confirms.pop(0)

    def ask(self, question: str, default: str | None = None) -> str:
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"Unexpected question: {question}")
        return self.answers.pop(0)
