from pathlib import Path

import pytest
from fakes import FakeRunner

from curasync.errors import GitCommandError
from curasync.git_wrapper import GitRepo
from curasync.runner import CommandResult


def test_run_raises_with_exit_code_and_stderr(tmp_path: Path) -> None:
    """Verifies that git failures carry the exit status and captured stderr."""
    runner = FakeRunner(
        {("git", "status"): CommandResult(128, stderr="fatal: not a git repository")}
    )
    repo = GitRepo(tmp_path, runner)

    with pytest.raises(GitCommandError) as exc_info:
        repo.status_porcelain()

    assert exc_info.value.returncode == 128
    assert "not a git repository" in str(exc_info.value)


def test_status_porcelain_splits_lines(tmp_path: Path) -> None:
    runner = FakeRunner(
        {("git", "status"): CommandResult(0, stdout=" M 5.6/cura.cfg\n?? new.cfg\n")}
    )

    assert GitRepo(tmp_path, runner).status_porcelain() == [
        "M 5.6/cura.cfg",
        "?? new.cfg",
    ]


def test_status_porcelain_empty(tmp_path: Path) -> None:
    assert GitRepo(tmp_path, FakeRunner()).status_porcelain() == []


@pytest.mark.parametrize(
    ("kwargs", "expected"),
    [
        ({}, ["git", "push"]),
        (
            {"remote": "origin", "branch": "main", "set_upstream": True},
            ["git", "push", "-u", "origin", "main"],
        ),
    ],
)
def test_push_arguments(tmp_path: Path, kwargs: dict, expected: list[str]) -> None:
    runner = FakeRunner()

    GitRepo(tmp_path, runner).push(**kwargs)

    assert runner.invocations == [(expected, tmp_path, False)]


def test_streamed_commands_do_not_capture(tmp_path: Path) -> None:
    runner = FakeRunner()
    repo = GitRepo(tmp_path, runner)

    repo.pull()
    repo.clone_into("https://example.com/cura.git")
    repo.show_staged_stat()

    assert [capture for _, _, capture in runner.invocations] == [False, False, False]
    assert runner.calls == [
        ["git", "pull"],
        ["git", "clone", "https://example.com/cura.git", "."],
        ["git", "diff", "--cached", "--stat"],
    ]


def test_remove_metadata(tmp_path: Path) -> None:
    (tmp_path / ".git" / "objects").mkdir(parents=True)
    repo = GitRepo(tmp_path, FakeRunner())
    assert repo.is_initialized()

    repo.remove_metadata()

    assert not repo.is_initialized()


def test_remove_metadata_handles_gitfile(tmp_path: Path) -> None:
    (tmp_path / ".git").write_text("gitdir: /elsewhere/.git\n")
    repo = GitRepo(tmp_path, FakeRunner())

    repo.remove_metadata()

    assert not (tmp_path / ".git").exists()
