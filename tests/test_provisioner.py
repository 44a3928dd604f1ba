from __future__ import annotations

import asyncio
import shutil
import subprocess
from pathlib import Path

import pytest

from wtlaunch.adapters.git import GitClient
from wtlaunch.models import EnvironmentState
from wtlaunch.provisioner import EnvironmentProvisioner, ProvisionError, environment_path
from wtlaunch.shell import CommandRunner


def provision(world, branch: str):
    runner = world.runner()
    provisioner = EnvironmentProvisioner(GitClient(runner, cwd=world.repo_root))
    return asyncio.run(provisioner.provision(world.repo_root, branch)), runner


def test_environment_path_sits_beside_repo(tmp_path: Path) -> None:
    path = environment_path(tmp_path / "app", "bugfix/ABBI-1381-pending-icon")

    assert path == tmp_path / "app-bugfix-ABBI-1381-pending-icon"


def test_existing_directory_is_reused_without_git_calls(world) -> None:
    environment_path(world.repo_root, "feature/x").mkdir()

    environment, runner = provision(world, "feature/x")

    assert environment.state is EnvironmentState.REUSED
    assert runner.invocations == []


def test_local_branch_is_attached(world) -> None:
    world.local_branches.add("feature/x")

    environment, runner = provision(world, "feature/x")

    assert environment.state is EnvironmentState.ATTACHED_LOCAL
    assert runner.invocations[-1] == ("git", "worktree", "add", str(environment.path), "feature/x")


def test_remote_branch_is_attached_when_no_local(world) -> None:
    world.remote_branches.add("feature/x")

    environment, runner = provision(world, "feature/x")

    assert environment.state is EnvironmentState.ATTACHED_REMOTE
    assert ("git", "show-ref", "--verify", "--quiet", "refs/remotes/origin/feature/x") in runner.invocations


def test_new_branch_is_created_when_missing_everywhere(world) -> None:
    environment, runner = provision(world, "feature/x")

    assert environment.state is EnvironmentState.CREATED_NEW
    assert runner.invocations[-1] == ("git", "worktree", "add", "-b", "feature/x", str(environment.path))


def test_second_provision_is_reused(world) -> None:
    first, _ = provision(world, "feature/x")
    second, runner = provision(world, "feature/x")

    assert first.state is EnvironmentState.CREATED_NEW
    assert second.state is EnvironmentState.REUSED
    assert runner.invocations == []


def test_git_failure_raises_provision_error(world) -> None:
    world.failing_branches.add("feature/bad")

    with pytest.raises(ProvisionError) as excinfo:
        provision(world, "feature/bad")

    assert excinfo.value.branch == "feature/bad"
    assert "invalid reference" in str(excinfo.value)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_provision_against_real_repository(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    repo.mkdir()

    def git(*args: str) -> None:
        subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)

    git("init", "-q")
    git("-c", "user.email=dev@example.com", "-c", "user.name=Dev", "commit", "-q", "--allow-empty", "-m", "init")
    git("branch", "existing")

    provisioner = EnvironmentProvisioner(GitClient(CommandRunner(), cwd=repo))

    attached = asyncio.run(provisioner.provision(repo, "existing"))
    created = asyncio.run(provisioner.provision(repo, "feature/new-thing"))
    reused = asyncio.run(provisioner.provision(repo, "feature/new-thing"))

    assert attached.state is EnvironmentState.ATTACHED_LOCAL
    assert created.state is EnvironmentState.CREATED_NEW
    assert reused.state is EnvironmentState.REUSED
    assert created.path == tmp_path / "repo-feature-new-thing"
    assert (created.path / ".git").exists()
    assert asyncio.run(GitClient(CommandRunner(), cwd=repo).local_branch_exists("feature/new-thing"))
