"""Serializable build pipeline models."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class BuildJob(BaseModel):
    """One queued build: where to build and where its window belongs."""

    path: Path = Field(..., description="Working copy the build runs in.")
    workspace: str = Field(..., description="Workspace the new window is moved to.")
    session: str = Field(..., description="Session whose output pane receives the build.")

    @field_validator("workspace", mode="before")
    @classmethod
    def _coerce_workspace(cls, value):
        return str(value)

    @property
    def name(self) -> str:
        return self.path.name


class BuildPlan(BaseModel):
    """Everything the detached runner needs, independent of the caller's environment."""

    jobs: list[BuildJob] = Field(default_factory=list)
    build_command: str = "make"
    output_target: str = "claude.right"
    window_app: str = "Xcode"
    follow_up_command: list[str] = Field(default_factory=list)
    watch_attempts: int = Field(default=120, ge=1)
    watch_interval: float = Field(default=2.0, ge=0)
    settle_delay: float = Field(default=2.0, ge=0)


class BuildStatus(str, Enum):
    PLACED = "placed"
    TIMEOUT = "timeout"
    TRIGGER_FAILED = "trigger_failed"
    FAILED = "failed"


class BuildOutcome(BaseModel):
    job: BuildJob
    status: BuildStatus
    window_id: str | None = None
    moved: bool = False
    configured: bool = False
    detail: str | None = None


class BuildReport(BaseModel):
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    outcomes: list[BuildOutcome] = Field(default_factory=list)

    @property
    def timeouts(self) -> list[BuildOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is BuildStatus.TIMEOUT]

    def summary(self) -> str:
        counts: dict[str, int] = {}
        for outcome in self.outcomes:
            counts[outcome.status.value] = counts.get(outcome.status.value, 0) + 1
        parts = [f"{status}={count}" for status, count in sorted(counts.items())]
        return f"{len(self.outcomes)} build(s): " + (", ".join(parts) or "none")


__all__ = ["BuildJob", "BuildOutcome", "BuildPlan", "BuildReport", "BuildStatus"]
