from __future__ import annotations

from pathlib import Path

import pytest

from wtlaunch.config import get_settings
from wtlaunch.shell import CommandResult, FakeCommandRunner, completed


class ToolWorld:
    """In-memory git/tmux/aerospace state behind a ``FakeCommandRunner``."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = repo_root
        self.inside_repo = True
        self.local_branches: set[str] = set()
        self.remote_branches: set[str] = set()
        self.failing_branches: set[str] = set()
        self.sessions: list[str] = []
        self.windows: set[str] = set()
        self.spawning_sessions: set[str] | None = None
        self.broken_sessions: set[str] = set()
        self.events: list[str] = []
        self._next_window = 100

    def runner(self, **kwargs) -> FakeCommandRunner:
        return FakeCommandRunner(handler=self.handle, **kwargs)

    def handle(self, args: tuple[str, ...]) -> CommandResult | None:
        tool = args[0]
        if tool == "git":
            return self._git(args)
        if tool == "tmux":
            return self._tmux(args)
        if tool == "aerospace":
            return self._aerospace(args)
        return None

    def _git(self, args: tuple[str, ...]) -> CommandResult:
        if args[1:3] == ("rev-parse", "--is-inside-work-tree"):
            if not self.inside_repo:
                return completed(args, returncode=128, stderr="fatal: not a git repository")
            return completed(args, "true\n")
        if args[1:3] == ("rev-parse", "--show-toplevel"):
            return completed(args, f"{self.repo_root}\n")
        if args[1] == "show-ref":
            ref = args[-1]
            if ref.startswith("refs/heads/"):
                found = ref[len("refs/heads/"):] in self.local_branches
            else:
                found = ref.split("/", 3)[-1] in self.remote_branches
            return completed(args, returncode=0 if found else 1)
        if args[1:3] == ("worktree", "add"):
            if "-b" in args:
                branch, path = args[args.index("-b") + 1], args[-1]
            else:
                path, branch = args[3], args[4]
            if branch in self.failing_branches:
                return completed(args, returncode=128, stderr=f"fatal: invalid reference: {branch}")
            Path(path).mkdir(parents=True)
            self.events.append(f"worktree:{branch}")
            return completed(args)
        return completed(args)

    def _tmux(self, args: tuple[str, ...]) -> CommandResult:
        command = args[1]
        if command == "list-sessions":
            if not self.sessions:
                return completed(args, returncode=1, stderr="no server running on /tmp/tmux-0/default")
            return completed(args, "\n".join(self.sessions) + "\n")
        if command == "has-session":
            return completed(args, returncode=0 if args[-1].lstrip("=") in self.sessions else 1)
        if command == "new-session":
            name = args[args.index("-s") + 1]
            self.sessions.append(name)
            self.events.append(f"session:{name}")
            return completed(args)
        if command == "send-keys":
            session = args[args.index("-t") + 1].split(":", 1)[0]
            if session in self.broken_sessions:
                return completed(args, returncode=1, stderr=f"can't find session: {session}")
            if args[-1] == "Enter":
                self.events.append(f"build:{session}")
                if self.spawning_sessions is None or session in self.spawning_sessions:
                    self.windows.add(str(self._next_window))
                    self._next_window += 1
            return completed(args)
        return completed(args)

    def _aerospace(self, args: tuple[str, ...]) -> CommandResult:
        if args[1] == "list-windows":
            lines = [f"{window} | Xcode | Project.xcworkspace" for window in sorted(self.windows)]
            lines.append("7 | Safari | Docs")
            return completed(args, "\n".join(lines) + "\n")
        if args[1] == "move-node-to-workspace":
            self.events.append(f"move:{args[3]}->{args[4]}")
            return completed(args)
        return completed(args)


@pytest.fixture
def world(tmp_path: Path) -> ToolWorld:
    repo_root = tmp_path / "app"
    repo_root.mkdir()
    return ToolWorld(repo_root)


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("WTLAUNCH_PROFILE_PATHS", str(tmp_path / "no-profiles"))
    monkeypatch.setenv("WTLAUNCH_WATCH_ATTEMPTS", "2")
    monkeypatch.setenv("WTLAUNCH_WATCH_INTERVAL", "0")
    monkeypatch.setenv("WTLAUNCH_SETTLE_DELAY", "0")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
