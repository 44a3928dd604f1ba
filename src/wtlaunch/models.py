"""Records produced while provisioning a batch of branches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .builds.models import BuildJob
from .naming import BranchNames


class EnvironmentState(str, Enum):
    REUSED = "reused"
    ATTACHED_LOCAL = "attached-local"
    ATTACHED_REMOTE = "attached-remote"
    CREATED_NEW = "created-new"


class SessionState(str, Enum):
    REUSED = "reused"
    CREATED = "created"


@dataclass(slots=True)
class Environment:
    path: Path
    branch: str
    state: EnvironmentState


@dataclass(slots=True)
class SessionRecord:
    label: str
    name: str
    state: SessionState
    ordinal: int | None = None


@dataclass(slots=True)
class BranchOutcome:
    """What happened to one input branch."""

    names: BranchNames
    environment: Environment | None = None
    session: SessionRecord | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class BatchState:
    """Ordinal counter and build queue threaded through one invocation.

    ``next_ordinal`` starts at the number of sessions that existed before the
    run and advances only when a session is created.
    """

    next_ordinal: int
    jobs: list[BuildJob] = field(default_factory=list)
    outcomes: list[BranchOutcome] = field(default_factory=list)

    def claim_ordinal(self) -> int:
        ordinal = self.next_ordinal
        self.next_ordinal += 1
        return ordinal

    def enqueue(self, job: BuildJob) -> None:
        self.jobs.append(job)

    @property
    def failures(self) -> list[BranchOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]


__all__ = [
    "BatchState",
    "BranchOutcome",
    "Environment",
    "EnvironmentState",
    "SessionRecord",
    "SessionState",
]
