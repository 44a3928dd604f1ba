from __future__ import annotations

import asyncio

import pytest

from wtlaunch.adapters.tmux import TmuxClient
from wtlaunch.adapters.git import GitClient
from wtlaunch.batch import BatchLauncher
from wtlaunch.models import EnvironmentState, SessionState
from wtlaunch.profiles import builtin_profile
from wtlaunch.provisioner import EnvironmentProvisioner, ProvisionError
from wtlaunch.sessions import SessionLauncher, SessionMatcher, SessionRegistry, session_ordinal


def make_batch(world, *, mode: str = "substring", fail_fast: bool = False):
    runner = world.runner()
    profile = builtin_profile()
    tmux = TmuxClient(runner)
    registry = SessionRegistry(tmux, SessionLauncher(tmux, profile), SessionMatcher(mode))
    provisioner = EnvironmentProvisioner(GitClient(runner, cwd=world.repo_root))
    return BatchLauncher(provisioner, registry, profile, fail_fast=fail_fast), runner


def test_substring_matcher_collides_on_contained_labels() -> None:
    matcher = SessionMatcher("substring")

    assert matcher.find("login", ["0) main", "2) login Fix"]) == "2) login Fix"


def test_exact_matcher_ignores_ordinal_prefix_only() -> None:
    matcher = SessionMatcher("exact")

    assert matcher.find("login", ["2) login Fix"]) is None
    assert matcher.find("login Fix", ["2) login Fix"]) == "2) login Fix"


def test_unknown_match_mode_rejected() -> None:
    with pytest.raises(ValueError):
        SessionMatcher("fuzzy")


def test_session_ordinal_parsing() -> None:
    assert session_ordinal("12) DCT-1 Fix") == 12
    assert session_ordinal("Build Runner") is None


def test_same_branch_twice_creates_one_session_and_one_job(world) -> None:
    batch, _ = make_batch(world)
    branch = "bugfix/ABBI-1381-pending-icon"

    state = asyncio.run(batch.run(world.repo_root, [branch, branch]))

    first, second = state.outcomes
    assert first.environment.state is EnvironmentState.CREATED_NEW
    assert first.session.state is SessionState.CREATED
    assert second.environment.state is EnvironmentState.REUSED
    assert second.session.state is SessionState.REUSED
    assert world.sessions == ["0) ABBI-1381 Pending Icon"]
    assert len(state.jobs) == 1
    assert state.jobs[0].session == "0) ABBI-1381 Pending Icon"
    assert state.jobs[0].workspace == "0"


def test_ordinals_seeded_from_existing_and_skip_reused(world) -> None:
    world.sessions = ["main", "7) DCT-2 Reused Work"]
    batch, _ = make_batch(world)

    state = asyncio.run(
        batch.run(world.repo_root, ["feature/DCT-1-first", "task/DCT-2-reused-work", "feature/DCT-3-third"])
    )

    records = [outcome.session for outcome in state.outcomes]
    assert [record.state for record in records] == [SessionState.CREATED, SessionState.REUSED, SessionState.CREATED]
    assert [record.ordinal for record in records] == [2, 7, 3]
    assert [job.workspace for job in state.jobs] == ["2", "3"]
    assert state.next_ordinal == 4


def test_jobs_only_for_created_sessions_in_input_order(world) -> None:
    world.sessions = ["0) DCT-5 Existing"]
    batch, _ = make_batch(world)

    state = asyncio.run(batch.run(world.repo_root, ["feature/DCT-9-b", "feature/DCT-5-existing", "feature/DCT-8-a"]))

    created = [o.session.name for o in state.outcomes if o.session.state is SessionState.CREATED]
    assert [job.session for job in state.jobs] == created == ["1) DCT-9 B", "2) DCT-8 A"]


def test_exact_mode_does_not_collide(world) -> None:
    world.sessions = ["0) login Fix"]
    batch, _ = make_batch(world, mode="exact")

    state = asyncio.run(batch.run(world.repo_root, ["login"]))

    assert state.outcomes[0].session.state is SessionState.CREATED
    assert world.sessions[-1] == "1) login"


def test_layout_commands(world) -> None:
    batch, runner = make_batch(world)

    state = asyncio.run(batch.run(world.repo_root, ["feature/DCT-46934-login-fix"]))

    path = str(state.outcomes[0].environment.path)
    tmux_calls = [args[1:] for args in runner.invocations if args[0] == "tmux" and args[1] != "list-sessions"]
    name = "0) DCT-46934 Login Fix"
    assert tmux_calls[0][:8] == ("new-session", "-d", "-s", name, "-n", "claude", "-c", path)
    agent_command = tmux_calls[0][8]
    assert agent_command.startswith("claude --dangerously-skip-permissions 'Start planning based on the Jira task DCT-46934.")
    assert agent_command.endswith("; exec $SHELL")
    assert tmux_calls[1] == ("split-window", "-t", f"{name}:claude", "-h", "-c", path)
    assert tmux_calls[2] == ("select-pane", "-t", f"{name}:claude.left")
    assert tmux_calls[3] == ("new-window", "-t", f"{name}:", "-n", "lazygit", "-c", path, "lazygit; exec $SHELL")
    assert tmux_calls[4] == ("select-window", "-t", f"{name}:claude")


def test_branch_without_ticket_gets_no_prompt(world) -> None:
    batch, runner = make_batch(world)

    asyncio.run(batch.run(world.repo_root, ["cleanup"]))

    new_session = next(args for args in runner.invocations if args[:2] == ("tmux", "new-session"))
    assert new_session[-1] == "claude --dangerously-skip-permissions; exec $SHELL"


def test_failed_branch_is_isolated(world) -> None:
    world.failing_branches.add("feature/DCT-1-bad")
    batch, _ = make_batch(world)

    state = asyncio.run(batch.run(world.repo_root, ["feature/DCT-1-bad", "feature/DCT-2-good"]))

    assert [outcome.failed for outcome in state.outcomes] == [True, False]
    assert len(state.failures) == 1
    assert [job.session for job in state.jobs] == ["0) DCT-2 Good"]


def test_fail_fast_aborts_batch(world) -> None:
    world.failing_branches.add("feature/DCT-1-bad")
    batch, _ = make_batch(world, fail_fast=True)

    with pytest.raises(ProvisionError):
        asyncio.run(batch.run(world.repo_root, ["feature/DCT-1-bad", "feature/DCT-2-good"]))

    assert world.sessions == []
