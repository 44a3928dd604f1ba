"""Terminal multiplexer commands used to lay out branch sessions."""

from __future__ import annotations

import logging
from pathlib import Path

from ..shell import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


class TmuxError(RuntimeError):
    """Raised when a tmux command required for a session layout fails."""


class TmuxClient:
    def __init__(self, runner: CommandRunner, *, executable: str = "tmux") -> None:
        self._runner = runner
        self._executable = executable

    async def _tmux(self, *args: str) -> CommandResult:
        return await self._runner.run(self._executable, *args)

    async def _checked(self, *args: str) -> CommandResult:
        result = await self._tmux(*args)
        if not result.ok:
            raise TmuxError(result.describe())
        return result

    async def has_session(self, name: str) -> bool:
        # "=" forces an exact match instead of tmux's prefix matching.
        result = await self._tmux("has-session", "-t", f"={name}")
        return result.ok

    async def list_sessions(self) -> list[str]:
        result = await self._tmux("list-sessions", "-F", "#{session_name}")
        if not result.ok:
            # No server running means no sessions.
            logger.debug("tmux list-sessions failed", extra={"detail": result.describe()})
            return []
        return [line for line in result.stdout.splitlines() if line.strip()]

    async def new_session(self, name: str, *, window: str, cwd: Path, command: str | None = None) -> None:
        args = ["new-session", "-d", "-s", name, "-n", window, "-c", str(cwd)]
        if command:
            args.append(command)
        await self._checked(*args)

    async def new_window(self, session: str, *, window: str, cwd: Path, command: str | None = None) -> None:
        args = ["new-window", "-t", f"{session}:", "-n", window, "-c", str(cwd)]
        if command:
            args.append(command)
        await self._checked(*args)

    async def split_window(self, target: str, *, cwd: Path, horizontal: bool = True) -> None:
        await self._checked("split-window", "-t", target, "-h" if horizontal else "-v", "-c", str(cwd))

    async def select_pane(self, target: str, *extra: str) -> CommandResult:
        """Best effort: the caller decides whether a failure matters."""

        return await self._tmux("select-pane", "-t", target, *extra)

    async def select_window(self, target: str) -> None:
        await self._checked("select-window", "-t", target)

    async def send_keys(self, target: str, text: str, *, enter: bool = True) -> None:
        await self._checked("send-keys", "-t", target, "-l", text)
        if enter:
            await self._checked("send-keys", "-t", target, "Enter")


__all__ = ["TmuxClient", "TmuxError"]
