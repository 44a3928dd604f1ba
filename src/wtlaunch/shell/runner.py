"""Async runner for external command-line collaborators."""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Sequence

from .utils import sanitize_environment


class CommandRunnerError(RuntimeError):
    """Base class for command runner errors."""


class CommandNotFoundError(CommandRunnerError):
    """Raised when an executable cannot be located."""


@dataclass(slots=True)
class CommandResult:
    """Holds the outcome of a single command invocation."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def describe(self) -> str:
        detail = self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"
        return f"{' '.join(self.args)}: {detail}"


class CommandRunner:
    """Execute external commands asynchronously."""

    @staticmethod
    def which(name: str) -> Path | None:
        binary = shutil.which(name)
        return Path(binary) if binary is not None else None

    def require(self, name: str) -> Path:
        binary = self.which(name)
        if binary is None:
            raise CommandNotFoundError(f"{name} not found on PATH")
        return binary

    async def run(self, *args: str, cwd: Path | str | None = None) -> CommandResult:
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd is not None else None,
                env=sanitize_environment(),
            )
        except FileNotFoundError as exc:
            raise CommandNotFoundError(f"{args[0]} not found on PATH") from exc
        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")
        return CommandResult(args=tuple(args), returncode=process.returncode, stdout=stdout, stderr=stderr)


Handler = Callable[[tuple[str, ...]], "CommandResult | None"]


class FakeCommandRunner(CommandRunner):
    """Test double that simulates command responses.

    A ``handler`` may inspect each argument vector and return a result; when it
    returns ``None`` (or is absent) the queued ``responses`` are consumed, and
    once those run out every command succeeds with empty output.
    """

    def __init__(
        self,
        responses: Iterable[CommandResult] | None = None,
        *,
        handler: Handler | None = None,
        available: Sequence[str] | None = None,
    ) -> None:
        self._responses = list(responses or [])
        self._handler = handler
        self._available = set(available) if available is not None else None
        self._invocations: list[tuple[str, ...]] = []
        self._cwds: list[str | None] = []

    def which(self, name: str) -> Path | None:  # type: ignore[override]
        if self._available is None or name in self._available:
            return Path("/usr/bin") / name
        return None

    async def run(self, *args: str, cwd: Path | str | None = None) -> CommandResult:  # type: ignore[override]
        self._invocations.append(tuple(args))
        self._cwds.append(str(cwd) if cwd is not None else None)
        if self._handler is not None:
            result = self._handler(tuple(args))
            if result is not None:
                return result
        if self._responses:
            return self._responses.pop(0)
        return CommandResult(args=tuple(args), returncode=0, stdout="", stderr="")

    @property
    def invocations(self) -> list[tuple[str, ...]]:
        return self._invocations

    @property
    def cwds(self) -> list[str | None]:
        return self._cwds


def completed(args: Sequence[str], stdout: str = "", *, returncode: int = 0, stderr: str = "") -> CommandResult:
    """Build a ``CommandResult`` for scripted responses."""

    return CommandResult(args=tuple(args), returncode=returncode, stdout=stdout, stderr=stderr)
