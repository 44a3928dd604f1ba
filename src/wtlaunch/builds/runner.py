"""Sequential build runner.

Builds share one toolchain-generation cache that is unsafe under concurrent
access, so jobs run strictly one after another: trigger, watch, assign, then
the next job. A job whose window never appears costs at most the watcher's
attempt budget.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
from datetime import datetime, timezone
from typing import Iterable

from ..adapters.tmux import TmuxClient, TmuxError
from .assigner import WorkspaceAssigner
from .models import BuildJob, BuildOutcome, BuildReport, BuildStatus
from .watcher import Sleep, WindowWatcher

logger = logging.getLogger(__name__)


def build_keystrokes(job: BuildJob, build_command: str) -> str:
    return f"cd {shlex.quote(str(job.path))} && {build_command}"


class SequentialBuildRunner:
    def __init__(
        self,
        tmux: TmuxClient,
        watcher: WindowWatcher,
        assigner: WorkspaceAssigner,
        *,
        build_command: str = "make",
        output_target: str = "claude.right",
        settle_delay: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._tmux = tmux
        self._watcher = watcher
        self._assigner = assigner
        self._build_command = build_command
        self._output_target = output_target
        self._settle_delay = settle_delay
        self._sleep = sleep

    async def run_job(self, job: BuildJob) -> BuildOutcome:
        logger.info("Building %s -> workspace %s", job.name, job.workspace, extra={"session": job.session})
        before = await self._watcher.snapshot()

        try:
            await self._tmux.send_keys(f"{job.session}:{self._output_target}", build_keystrokes(job, self._build_command))
        except TmuxError as exc:
            logger.warning("Could not start build for %s: %s", job.name, exc)
            return BuildOutcome(job=job, status=BuildStatus.TRIGGER_FAILED, detail=str(exc))

        window_id = await self._watcher.wait_for_new(before)
        if window_id is not None and self._settle_delay:
            # Let the application finish loading before it is moved.
            await self._sleep(self._settle_delay)
        return await self._assigner.assign(job, window_id)

    async def run(self, jobs: Iterable[BuildJob]) -> BuildReport:
        report = BuildReport()
        for job in jobs:
            try:
                outcome = await self.run_job(job)
            except Exception as exc:
                # The next job still runs; the failure is recorded in the report.
                logger.exception("Build for %s failed", job.name, extra={"session": job.session})
                outcome = BuildOutcome(job=job, status=BuildStatus.FAILED, detail=str(exc))
            report.outcomes.append(outcome)
        report.completed_at = datetime.now(timezone.utc)
        logger.info("All builds complete: %s", report.summary())
        return report


__all__ = ["SequentialBuildRunner", "build_keystrokes"]
