"""Launch profile models."""

from __future__ import annotations

import re
import shlex
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_PROFILE_ID = "default"
DEFAULT_CATEGORY_PREFIXES = ("bugfix", "task", "feature", "hotfix", "epic")
DEFAULT_AGENT_PROMPT = "Start planning based on the Jira task {ticket_id}. Read CLAUDE.md for instructions."
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


class LaunchProfile(BaseModel):
    """Tooling used to open, build and place one branch environment."""

    id: str = Field(..., description="Unique identifier for the profile.")
    title: str = Field(default="", description="Display title for the profile.")
    agent_command: str = Field(default="claude", description="Interactive coding agent executable.")
    agent_flags: list[str] = Field(
        default_factory=lambda: ["--dangerously-skip-permissions"],
        description="Flags passed to the agent before the planning prompt.",
    )
    agent_prompt: str | None = Field(
        default=DEFAULT_AGENT_PROMPT,
        description="Planning prompt template; supports {ticket_id}, {branch} and {label}.",
    )
    git_ui_command: str = Field(default="lazygit", description="Git inspection tool executable.")
    build_command: str = Field(default="make", description="Shell command that starts the build.")
    window_app: str = Field(default="Xcode", description="Application whose new window is relocated.")
    category_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_CATEGORY_PREFIXES),
        description="Branch category markers stripped from short labels.",
    )
    follow_up_command: list[str] = Field(
        default_factory=list,
        description="Best-effort command run after relocation; supports {window_id} and {workspace}.",
    )
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "agent_command", "git_ui_command", "build_command", "window_app")
    @classmethod
    def _require_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Profile fields must not be empty")
        return normalized

    @field_validator("agent_flags", "category_prefixes", "follow_up_command", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any):  # type: ignore[override]
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return list(value)
        raise TypeError("Profile list fields must be sequences of strings")

    def required_tools(self) -> list[str]:
        """Executables that must be resolvable before anything is mutated."""

        return [shlex.split(command)[0] for command in (self.agent_command, self.git_ui_command)]

    def render_prompt(self, *, ticket_id: str, branch: str, label: str) -> str | None:
        if not self.agent_prompt or not ticket_id:
            return None
        return fill_placeholders(self.agent_prompt, ticket_id=ticket_id, branch=branch, label=label)


def fill_placeholders(template: str, **values: str) -> str:
    """Substitute the named ``{key}`` markers; any other braces are kept verbatim."""

    return _PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), template)


def builtin_profile() -> LaunchProfile:
    """Profile used when no file defines the ``default`` id."""

    return LaunchProfile(id=DEFAULT_PROFILE_ID, title="Claude + lazygit + Xcode")


__all__ = [
    "DEFAULT_CATEGORY_PREFIXES",
    "DEFAULT_PROFILE_ID",
    "LaunchProfile",
    "builtin_profile",
    "fill_placeholders",
]
