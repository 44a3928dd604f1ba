"""AeroSpace window inventory and workspace mover."""

from __future__ import annotations

import logging

from ..shell import CommandResult, CommandRunner, CommandRunnerError, completed

logger = logging.getLogger(__name__)


def parse_window_listing(output: str, app_name: str | None = None) -> set[str]:
    """Return window ids from ``aerospace list-windows`` output.

    Lines look like ``6789 | Xcode | Project.xcodeproj``. The application
    column is compared case-insensitively; lines without columns are matched
    as a whole.
    """

    needle = app_name.lower() if app_name else None
    window_ids: set[str] = set()
    for line in output.splitlines():
        columns = [column.strip() for column in line.split("|")]
        window_id = columns[0]
        if not window_id:
            continue
        if needle is not None:
            haystack = columns[1] if len(columns) > 1 else line
            if needle not in haystack.lower():
                continue
        window_ids.add(window_id)
    return window_ids


class AerospaceInventory:
    """Lists windows across all workspaces, optionally filtered by application."""

    def __init__(self, runner: CommandRunner, *, executable: str = "aerospace") -> None:
        self._runner = runner
        self._executable = executable

    async def list_windows(self, app_name: str | None = None) -> set[str]:
        try:
            result = await self._runner.run(self._executable, "list-windows", "--all")
        except CommandRunnerError as exc:
            logger.debug("window inventory unavailable", extra={"detail": str(exc)})
            return set()
        if not result.ok:
            logger.debug("window inventory unavailable", extra={"detail": result.describe()})
            return set()
        return parse_window_listing(result.stdout, app_name)


class AerospaceMover:
    """Moves a window to a workspace; the result is returned, never raised."""

    def __init__(self, runner: CommandRunner, *, executable: str = "aerospace") -> None:
        self._runner = runner
        self._executable = executable

    async def move(self, window_id: str, workspace: str) -> CommandResult:
        args = (self._executable, "move-node-to-workspace", "--window-id", window_id, workspace)
        try:
            return await self._runner.run(*args)
        except CommandRunnerError as exc:
            return completed(args, returncode=127, stderr=str(exc))


__all__ = ["AerospaceInventory", "AerospaceMover", "parse_window_listing"]
