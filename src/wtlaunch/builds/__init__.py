"""Sequential build pipeline: queue hand-off, window detection, placement."""

from .assigner import WorkspaceAssigner
from .dispatch import BuildDispatcher, build_runner, read_plan, report_path, write_plan, write_report
from .models import BuildJob, BuildOutcome, BuildPlan, BuildReport, BuildStatus
from .runner import SequentialBuildRunner
from .watcher import WindowWatcher, pick_new_window, poll

__all__ = [
    "BuildDispatcher",
    "BuildJob",
    "BuildOutcome",
    "BuildPlan",
    "BuildReport",
    "BuildStatus",
    "SequentialBuildRunner",
    "WindowWatcher",
    "WorkspaceAssigner",
    "build_runner",
    "pick_new_window",
    "poll",
    "read_plan",
    "report_path",
    "write_plan",
    "write_report",
]
