"""Version-control queries and commands used to provision working copies."""

from __future__ import annotations

from pathlib import Path

from ..shell import CommandResult, CommandRunner


class GitError(RuntimeError):
    """Raised when a git command required for provisioning fails."""


class GitClient:
    """Thin async wrapper over the git CLI, bound to a working directory."""

    def __init__(self, runner: CommandRunner, *, cwd: Path | None = None, executable: str = "git") -> None:
        self._runner = runner
        self._cwd = cwd
        self._executable = executable

    async def _git(self, *args: str) -> CommandResult:
        return await self._runner.run(self._executable, *args, cwd=self._cwd)

    async def _checked(self, *args: str) -> CommandResult:
        result = await self._git(*args)
        if not result.ok:
            raise GitError(result.describe())
        return result

    async def is_inside_work_tree(self) -> bool:
        result = await self._git("rev-parse", "--is-inside-work-tree")
        return result.ok and result.stdout.strip() == "true"

    async def toplevel(self) -> Path:
        result = await self._checked("rev-parse", "--show-toplevel")
        return Path(result.stdout.strip())

    async def ref_exists(self, ref: str) -> bool:
        result = await self._git("show-ref", "--verify", "--quiet", ref)
        return result.ok

    async def local_branch_exists(self, branch: str) -> bool:
        return await self.ref_exists(f"refs/heads/{branch}")

    async def remote_branch_exists(self, branch: str, remote: str = "origin") -> bool:
        return await self.ref_exists(f"refs/remotes/{remote}/{branch}")

    async def add_worktree(self, path: Path, branch: str) -> None:
        """Attach a new working copy to an existing (local or remote-tracked) branch."""

        await self._checked("worktree", "add", str(path), branch)

    async def add_worktree_new_branch(self, path: Path, branch: str) -> None:
        await self._checked("worktree", "add", "-b", branch, str(path))


__all__ = ["GitClient", "GitError"]
