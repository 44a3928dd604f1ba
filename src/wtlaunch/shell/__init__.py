"""Subprocess utilities shared by the collaborator adapters."""

from .runner import (
    CommandNotFoundError,
    CommandResult,
    CommandRunner,
    CommandRunnerError,
    FakeCommandRunner,
    completed,
)

__all__ = [
    "CommandRunner",
    "CommandResult",
    "CommandRunnerError",
    "CommandNotFoundError",
    "FakeCommandRunner",
    "completed",
]
