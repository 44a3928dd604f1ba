"""Session registry and launcher for provisioned environments."""

from __future__ import annotations

import logging
import re
import shlex
from pathlib import Path
from typing import Iterable

from .adapters.tmux import TmuxClient
from .builds.models import BuildJob
from .models import BatchState, Environment, SessionRecord, SessionState
from .naming import BranchNames, session_name, tmux_safe
from .profiles import LaunchProfile

logger = logging.getLogger(__name__)

_ORDINAL_PREFIX = re.compile(r"^(\d+)\) ")


def window_name(command: str) -> str:
    return Path(shlex.split(command)[0]).name if command.strip() else command


def session_ordinal(name: str) -> int | None:
    match = _ORDINAL_PREFIX.match(name)
    return int(match.group(1)) if match else None


class SessionMatcher:
    """Decides whether an existing session already belongs to a label.

    ``substring`` mode treats any session whose name contains the label as a
    match, so ``Login`` also matches ``2) Login Fix``. ``exact`` mode compares
    the label against the session name with its ordinal prefix removed.
    """

    def __init__(self, mode: str = "substring") -> None:
        if mode not in {"substring", "exact"}:
            raise ValueError(f"unknown session match mode: {mode}")
        self.mode = mode

    def matches(self, label: str, existing: str) -> bool:
        if self.mode == "substring":
            return label in existing
        return _ORDINAL_PREFIX.sub("", existing, count=1) == label

    def find(self, label: str, sessions: Iterable[str]) -> str | None:
        for existing in sessions:
            if self.matches(label, existing):
                return existing
        return None


class SessionLauncher:
    """Materializes the agent/git window layout for one environment."""

    def __init__(self, tmux: TmuxClient, profile: LaunchProfile) -> None:
        self._tmux = tmux
        self._profile = profile

    @property
    def agent_window(self) -> str:
        return window_name(self._profile.agent_command)

    @property
    def git_window(self) -> str:
        return window_name(self._profile.git_ui_command)

    @property
    def output_target(self) -> str:
        return f"{self.agent_window}.right"

    def agent_command(self, names: BranchNames) -> str:
        argv = [*shlex.split(self._profile.agent_command), *self._profile.agent_flags]
        prompt = self._profile.render_prompt(ticket_id=names.ticket_id, branch=names.branch, label=names.label)
        if prompt:
            argv.append(prompt)
        return f"{shlex.join(argv)}; exec $SHELL"

    def git_ui_command(self) -> str:
        return f"{self._profile.git_ui_command}; exec $SHELL"

    async def materialize(self, name: str, environment: Environment, names: BranchNames, workspace: int) -> BuildJob:
        cwd = environment.path
        agent = f"{name}:{self.agent_window}"

        await self._tmux.new_session(name, window=self.agent_window, cwd=cwd, command=self.agent_command(names))
        await self._tmux.split_window(agent, cwd=cwd, horizontal=True)

        focused = await self._tmux.select_pane(f"{agent}.left")
        if not focused.ok:
            fallback = await self._tmux.select_pane(agent, "-L")
            if not fallback.ok:
                logger.debug("Could not focus agent pane", extra={"session": name, "detail": fallback.describe()})

        await self._tmux.new_window(name, window=self.git_window, cwd=cwd, command=self.git_ui_command())
        await self._tmux.select_window(agent)

        return BuildJob(path=cwd, workspace=str(workspace), session=name)


class SessionRegistry:
    """Creates a session per environment unless one already exists for its label."""

    def __init__(self, tmux: TmuxClient, launcher: SessionLauncher, matcher: SessionMatcher | None = None) -> None:
        self._tmux = tmux
        self._launcher = launcher
        self._matcher = matcher or SessionMatcher()

    async def existing_count(self) -> int:
        return len(await self._tmux.list_sessions())

    async def register(self, names: BranchNames, environment: Environment, state: BatchState) -> SessionRecord:
        label = tmux_safe(names.label)
        existing = self._matcher.find(label, await self._tmux.list_sessions())
        if existing is not None:
            logger.info("Session for '%s' already exists, skipping", label, extra={"session": existing})
            return SessionRecord(label=label, name=existing, state=SessionState.REUSED, ordinal=session_ordinal(existing))

        ordinal = state.next_ordinal
        name = session_name(ordinal, names.label)
        logger.info("Creating session: %s", name, extra={"path": str(environment.path)})
        job = await self._launcher.materialize(name, environment, names, ordinal)
        state.claim_ordinal()
        state.enqueue(job)
        return SessionRecord(label=label, name=name, state=SessionState.CREATED, ordinal=ordinal)


__all__ = [
    "SessionLauncher",
    "SessionMatcher",
    "SessionRegistry",
    "session_ordinal",
    "window_name",
]
