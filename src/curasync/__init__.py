"""curasync: keep your UltiMaker Cura configuration in a git repository.

This package provides the command-line interface and the small set of git
workflows (init, clone, pull, push) used to share a Cura configuration
directory between machines.
"""

from . import (
    cli,
    config,
    constants,
    context,
    errors,
    git_wrapper,
    guard,
    ops,
    prompt,
    runner,
    system,
)

__all__ = [
    "cli",
    "config",
    "constants",
    "context",
    "errors",
    "git_wrapper",
    "guard",
    "ops",
    "prompt",
    "runner",
    "system",
]
