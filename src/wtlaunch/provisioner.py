"""Idempotent creation of per-branch working copies."""

from __future__ import annotations

import logging
from pathlib import Path

from .adapters.git import GitClient, GitError
from .models import Environment, EnvironmentState
from .naming import safe_identifier

logger = logging.getLogger(__name__)


class ProvisionError(RuntimeError):
    """Raised when the working copy for one branch cannot be created."""

    def __init__(self, branch: str, message: str) -> None:
        super().__init__(f"{branch}: {message}")
        self.branch = branch


def environment_path(repo_root: Path, branch: str) -> Path:
    """Working copies live beside the main clone as ``<repo>-<safe branch>``."""

    return repo_root.parent / f"{repo_root.name}-{safe_identifier(branch)}"


class EnvironmentProvisioner:
    def __init__(self, git: GitClient, *, remote: str = "origin") -> None:
        self._git = git
        self._remote = remote

    async def provision(self, repo_root: Path, branch: str) -> Environment:
        """Reuse, attach or create the working copy for ``branch``.

        The first matching rule wins: an existing directory is reused untouched,
        otherwise a local branch, then a remote-tracking branch is attached, and
        only when neither exists is a new branch created.
        """

        path = environment_path(repo_root, branch)
        extra = {"branch": branch, "path": str(path)}

        if path.exists():
            logger.info("Working copy already exists: %s", path, extra=extra)
            return Environment(path=path, branch=branch, state=EnvironmentState.REUSED)

        try:
            if await self._git.local_branch_exists(branch):
                logger.info("Creating working copy for local branch: %s", branch, extra=extra)
                await self._git.add_worktree(path, branch)
                state = EnvironmentState.ATTACHED_LOCAL
            elif await self._git.remote_branch_exists(branch, self._remote):
                logger.info("Creating working copy for remote branch: %s/%s", self._remote, branch, extra=extra)
                await self._git.add_worktree(path, branch)
                state = EnvironmentState.ATTACHED_REMOTE
            else:
                logger.info("Creating working copy with new branch: %s", branch, extra=extra)
                await self._git.add_worktree_new_branch(path, branch)
                state = EnvironmentState.CREATED_NEW
        except GitError as exc:
            raise ProvisionError(branch, str(exc)) from exc

        return Environment(path=path, branch=branch, state=state)


__all__ = ["EnvironmentProvisioner", "ProvisionError", "environment_path"]
