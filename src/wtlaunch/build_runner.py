"""Detached entry point that executes a serialized build plan.

Started by ``wt-launch`` inside the runner session; its report file is the
completion channel for the batch, separate from the launcher's exit status.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from .builds import build_runner, read_plan, report_path, write_report
from .builds.models import BuildReport, BuildStatus
from .cli import configure_logging
from .shell import CommandRunner

RULE = "━" * 52


async def execute(plan_path: Path, runner: CommandRunner | None = None) -> BuildReport:
    plan = read_plan(plan_path)
    report = await build_runner(plan, runner or CommandRunner()).run(plan.jobs)
    write_report(report, report_path(plan_path))
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wt-launch-builds",
        description="Run queued worktree builds one at a time and place their windows.",
    )
    parser.add_argument("plan", type=Path, help="Path to a JSON build plan written by wt-launch")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    try:
        report = asyncio.run(execute(args.plan))
    except (OSError, ValidationError) as exc:
        print(f"Build plan {args.plan} could not be processed: {exc}", file=sys.stderr)
        raise SystemExit(1)

    print(RULE)
    print(f"All builds complete! {report.summary()}")
    for outcome in report.timeouts:
        print(f"Timeout waiting for window: {outcome.job.name}")
    for outcome in report.outcomes:
        if outcome.status is BuildStatus.FAILED:
            print(f"Build failed: {outcome.job.name}: {outcome.detail}")
    print(f"Report: {report_path(args.plan)}")
    print(RULE)


if __name__ == "__main__":
    main()
