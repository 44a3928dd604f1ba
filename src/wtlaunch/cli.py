"""Command-line entry point: provision branch environments and hand off builds."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from . import __version__
from .adapters.git import GitClient, GitError
from .adapters.tmux import TmuxClient, TmuxError
from .batch import BatchLauncher, plan_for
from .builds import BuildDispatcher, build_runner
from .config import WtLaunchSettings, get_settings
from .models import BatchState, SessionState
from .profiles import LaunchProfile, ProfileLoadError, ProfileLoader
from .provisioner import EnvironmentProvisioner, ProvisionError
from .sessions import SessionLauncher, SessionMatcher, SessionRegistry
from .shell import CommandRunner, CommandRunnerError


class PreflightError(RuntimeError):
    """Raised when the launcher cannot start safely."""


def configure_logging(level: str) -> None:
    """Configure root logging for wtlaunch entry points."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


async def preflight(runner: CommandRunner, git: GitClient, profile: LaunchProfile) -> Path:
    """Verify tools and repository before any mutation; returns the repo root."""

    missing = [tool for tool in ["git", "tmux", *profile.required_tools()] if runner.which(tool) is None]
    if missing:
        raise PreflightError(f"required tool(s) not found on PATH: {', '.join(missing)}")
    try:
        inside = await git.is_inside_work_tree()
    except CommandRunnerError as exc:
        raise PreflightError(str(exc)) from exc
    if not inside:
        raise PreflightError("not inside a git repository")
    try:
        return await git.toplevel()
    except GitError as exc:
        raise PreflightError(str(exc)) from exc


def resolve_profile(settings: WtLaunchSettings, profile_id: str | None = None) -> LaunchProfile:
    return ProfileLoader(settings.profile_paths).get(profile_id or settings.profile)


def print_summary(state: BatchState) -> None:
    created = sum(1 for o in state.outcomes if o.session and o.session.state is SessionState.CREATED)
    reused = sum(1 for o in state.outcomes if o.session and o.session.state is SessionState.REUSED)
    print(f"Done. {created} session(s) created, {reused} reused, {len(state.failures)} failed.")
    for outcome in state.failures:
        print(f"  failed: {outcome.names.branch}: {outcome.error}")


async def launch(args: argparse.Namespace, settings: WtLaunchSettings, runner: CommandRunner) -> int:
    profile = resolve_profile(settings, args.profile)
    git = GitClient(runner)
    repo_root = await preflight(runner, git, profile)

    tmux = TmuxClient(runner)
    launcher = SessionLauncher(tmux, profile)
    match_mode = "exact" if args.exact_match else settings.session_match
    registry = SessionRegistry(tmux, launcher, SessionMatcher(match_mode))
    batch = BatchLauncher(
        EnvironmentProvisioner(GitClient(runner, cwd=repo_root), remote=settings.remote),
        registry,
        profile,
        fail_fast=args.fail_fast,
    )

    state = await batch.run(repo_root, args.branches)
    print_summary(state)

    if state.jobs and not args.no_build:
        plan = plan_for(state, profile, output_target=launcher.output_target, settings=settings)
        if args.wait:
            print(f"Running {len(plan.jobs)} build(s) sequentially...")
            report = await build_runner(plan, runner).run(plan.jobs)
            print(report.summary())
        else:
            await BuildDispatcher(tmux, session=settings.runner_session).hand_off(plan, cwd=repo_root)
            print(f"Build runner started. Attach with: tmux attach -t '{settings.runner_session}'")

    print("Switch between sessions with: <prefix> + s")
    return 1 if state.failures else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wt-launch",
        description="Create git worktrees and tmux sessions with a coding agent and git UI per branch.",
    )
    parser.add_argument("branches", nargs="+", metavar="BRANCH", help="Branch to open an environment for")
    parser.add_argument("--profile", default=None, help="Launch profile id (default: WTLAUNCH_PROFILE)")
    parser.add_argument(
        "--exact-match",
        action="store_true",
        help="Treat a session as existing only when its label matches exactly",
    )
    parser.add_argument("--wait", action="store_true", help="Run builds in this process and wait for them")
    parser.add_argument("--no-build", action="store_true", help="Provision environments without building")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first branch that fails")
    parser.add_argument("--log-level", default=None, help="Override WTLAUNCH_LOG_LEVEL")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(argv: list[str] | None = None, *, runner: CommandRunner | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = get_settings()
    except ValueError as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    configure_logging((args.log_level or settings.log_level).upper())

    try:
        return asyncio.run(launch(args, settings, runner or CommandRunner()))
    except (PreflightError, ProfileLoadError, ProvisionError, TmuxError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> None:
    exit_code = run(argv)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
