"""Relocate a detected window and apply the application follow-up."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ..profiles.models import fill_placeholders
from ..shell import CommandResult, CommandRunner, CommandRunnerError, completed
from .models import BuildJob, BuildOutcome, BuildStatus

logger = logging.getLogger(__name__)


class WorkspaceMover(Protocol):
    async def move(self, window_id: str, workspace: str) -> CommandResult:
        ...


class WorkspaceAssigner:
    def __init__(
        self,
        mover: WorkspaceMover,
        runner: CommandRunner,
        *,
        follow_up_command: Sequence[str] = (),
    ) -> None:
        self._mover = mover
        self._runner = runner
        self._follow_up = list(follow_up_command)

    async def _follow_up_result(self, window_id: str, workspace: str) -> CommandResult | None:
        if not self._follow_up:
            return None
        args = [fill_placeholders(part, window_id=window_id, workspace=workspace) for part in self._follow_up]
        try:
            return await self._runner.run(*args)
        except CommandRunnerError as exc:
            return completed(args, returncode=127, stderr=str(exc))

    async def assign(self, job: BuildJob, window_id: str | None) -> BuildOutcome:
        if window_id is None:
            logger.warning("Timeout waiting for window: %s", job.name, extra={"session": job.session})
            return BuildOutcome(job=job, status=BuildStatus.TIMEOUT)

        # Both commands are best effort; a failure only means the side effect is missing.
        moved = await self._mover.move(window_id, job.workspace)
        if moved.ok:
            logger.info("Moved window %s to workspace %s", window_id, job.workspace)
        else:
            logger.debug("Ignoring failed window move", extra={"detail": moved.describe()})

        configured = await self._follow_up_result(window_id, job.workspace)
        if configured is not None and not configured.ok:
            logger.debug("Ignoring failed follow-up command", extra={"detail": configured.describe()})

        return BuildOutcome(
            job=job,
            status=BuildStatus.PLACED,
            window_id=window_id,
            moved=moved.ok,
            configured=bool(configured and configured.ok),
        )


__all__ = ["WorkspaceAssigner", "WorkspaceMover"]
