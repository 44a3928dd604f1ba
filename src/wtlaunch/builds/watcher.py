"""Detect a newly spawned application window by polling an inventory."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Protocol, TypeVar

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


class WindowInventory(Protocol):
    async def list_windows(self, app_name: str | None = None) -> set[str]:
        ...


async def poll(
    probe: Callable[[], Awaitable[T | None]],
    *,
    max_attempts: int,
    interval: float,
    sleep: Sleep = asyncio.sleep,
) -> T | None:
    """Call ``probe`` after each pause until it yields a value or attempts run out."""

    for _ in range(max_attempts):
        await sleep(interval)
        value = await probe()
        if value is not None:
            return value
    return None


def _window_sort_key(window_id: str) -> tuple[int, int, str]:
    if window_id.isdigit():
        return (0, int(window_id), window_id)
    return (1, 0, window_id)


def pick_new_window(before: set[str], after: set[str]) -> str | None:
    """Lowest identifier present in ``after`` but not ``before``."""

    fresh = after - before
    if not fresh:
        return None
    return min(fresh, key=_window_sort_key)


class WindowWatcher:
    def __init__(
        self,
        inventory: WindowInventory,
        app_name: str,
        *,
        max_attempts: int = 120,
        interval: float = 2.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._inventory = inventory
        self._app_name = app_name
        self._max_attempts = max_attempts
        self._interval = interval
        self._sleep = sleep

    async def snapshot(self) -> set[str]:
        return set(await self._inventory.list_windows(self._app_name))

    async def wait_for_new(self, before: set[str]) -> str | None:
        baseline = frozenset(before)

        async def probe() -> str | None:
            return pick_new_window(set(baseline), await self.snapshot())

        return await poll(probe, max_attempts=self._max_attempts, interval=self._interval, sleep=self._sleep)


__all__ = ["WindowInventory", "WindowWatcher", "pick_new_window", "poll"]
