from collections.abc import Callable, Sequence
from pathlib import Path

import pytest
from fakes import FakePrompter, FakeRunner, Response

from curasync.config import Config
from curasync.context import SyncContext
from curasync.guard import ProcessGuard
from curasync.system import LinuxStrategy

ContextFactory = Callable[..., SyncContext]


@pytest.fixture
def cura_dir(tmp_path: Path) -> Path:
    """A Cura configuration directory with the supported version folder."""
    path = tmp_path / "cura"
    (path / "5.6").mkdir(parents=True)
    (path / "5.6" / "cura.cfg").write_text("[general]\nversion = 7\n")
    return path


@pytest.fixture
def make_context(cura_dir: Path) -> ContextFactory:
    """Builds a SyncContext wired to a FakeRunner and a FakePrompter.

    The grace period is zero so terminating Cura never sleeps.
    """

    def _make(
        confirms: Sequence[bool] = (),
        answers: Sequence[str] = (),
        responses: dict[tuple[str, ...], Response] | None = None,
        initialized: bool = False,
    ) -> SyncContext:
        if initialized:
            (cura_dir / ".git").mkdir(exist_ok=True)

        config = Config()
        config.guard.grace_period = 0.0
        runner = FakeRunner(responses)
        prompter = FakePrompter(confirms, answers)
        strategy = LinuxStrategy()
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
            is_initialized=initialized,
            config=config,
            runner=runner,
            prompter=prompter,
            guard=guard,
        )

    return _make
