"""Hand the build queue to a runner, detached or in-process."""

from __future__ import annotations

import asyncio
import logging
import shlex
import sys
import tempfile
from pathlib import Path

from ..adapters.aerospace import AerospaceInventory, AerospaceMover
from ..adapters.tmux import TmuxClient
from ..shell import CommandRunner
from .assigner import WorkspaceAssigner
from .models import BuildPlan, BuildReport
from .runner import SequentialBuildRunner
from .watcher import Sleep, WindowInventory, WindowWatcher

logger = logging.getLogger(__name__)


def report_path(plan_path: Path) -> Path:
    return plan_path.with_suffix(".report.json")


def write_plan(plan: BuildPlan, directory: Path | None = None) -> Path:
    handle = tempfile.NamedTemporaryFile(
        "w",
        prefix="wtlaunch-plan-",
        suffix=".json",
        dir=str(directory) if directory is not None else None,
        delete=False,
        encoding="utf-8",
    )
    with handle:
        handle.write(plan.model_dump_json(indent=2))
    return Path(handle.name)


def read_plan(path: Path) -> BuildPlan:
    return BuildPlan.model_validate_json(Path(path).read_text(encoding="utf-8"))


def write_report(report: BuildReport, path: Path) -> None:
    Path(path).write_text(report.model_dump_json(indent=2), encoding="utf-8")


def build_runner(
    plan: BuildPlan,
    runner: CommandRunner,
    *,
    inventory: WindowInventory | None = None,
    sleep: Sleep = asyncio.sleep,
) -> SequentialBuildRunner:
    """Wire a ``SequentialBuildRunner`` from a plan."""

    watcher = WindowWatcher(
        inventory or AerospaceInventory(runner),
        plan.window_app,
        max_attempts=plan.watch_attempts,
        interval=plan.watch_interval,
        sleep=sleep,
    )
    assigner = WorkspaceAssigner(AerospaceMover(runner), runner, follow_up_command=plan.follow_up_command)
    return SequentialBuildRunner(
        TmuxClient(runner),
        watcher,
        assigner,
        build_command=plan.build_command,
        output_target=plan.output_target,
        settle_delay=plan.settle_delay,
        sleep=sleep,
    )


class BuildDispatcher:
    """Starts the sequential runner so the caller is never blocked by builds."""

    def __init__(self, tmux: TmuxClient, *, session: str = "Build Runner", python: str | None = None) -> None:
        self._tmux = tmux
        self._session = session
        self._python = python or sys.executable

    def runner_command(self, plan_path: Path) -> str:
        return (
            f"{shlex.quote(self._python)} -m wtlaunch.build_runner {shlex.quote(str(plan_path))}"
            "; exec $SHELL"
        )

    async def hand_off(self, plan: BuildPlan, *, cwd: Path) -> Path | None:
        """Write the plan and start the detached runner; returns the plan path."""

        if not plan.jobs:
            return None
        plan_path = write_plan(plan)
        command = self.runner_command(plan_path)
        if await self._tmux.has_session(self._session):
            logger.warning(
                "Session '%s' already exists; adding a builds window to it", self._session,
                extra={"plan": str(plan_path)},
            )
            await self._tmux.new_window(self._session, window="builds", cwd=cwd, command=command)
        else:
            await self._tmux.new_session(self._session, window="builds", cwd=cwd, command=command)
        logger.info("Build runner started with %d job(s)", len(plan.jobs), extra={"plan": str(plan_path)})
        return plan_path


__all__ = [
    "BuildDispatcher",
    "build_runner",
    "read_plan",
    "report_path",
    "write_plan",
    "write_report",
]
