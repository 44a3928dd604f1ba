"""Configuration management for wtlaunch."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated
import os

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

SESSION_MATCH_MODES = {"substring", "exact"}


class WtLaunchSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    profile: str = Field(default="default", validation_alias="WTLAUNCH_PROFILE")
    # NoDecode: the raw os.pathsep-separated string reaches the validator below.
    profile_paths: Annotated[tuple[Path, ...], NoDecode] = Field(
        default=(Path("profiles"),), validation_alias="WTLAUNCH_PROFILE_PATHS"
    )
    log_level: str = Field(default="INFO", validation_alias="WTLAUNCH_LOG_LEVEL")
    remote: str = Field(default="origin", validation_alias="WTLAUNCH_REMOTE")
    session_match: str = Field(default="substring", validation_alias="WTLAUNCH_SESSION_MATCH")
    watch_attempts: int = Field(default=120, validation_alias="WTLAUNCH_WATCH_ATTEMPTS")
    watch_interval: float = Field(default=2.0, validation_alias="WTLAUNCH_WATCH_INTERVAL")
    settle_delay: float = Field(default=2.0, validation_alias="WTLAUNCH_SETTLE_DELAY")
    runner_session: str = Field(default="Build Runner", validation_alias="WTLAUNCH_RUNNER_SESSION")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "WTLAUNCH_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("session_match")
    @classmethod
    def _normalize_session_match(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SESSION_MATCH_MODES:
            raise ValueError("WTLAUNCH_SESSION_MATCH must be 'substring' or 'exact'")
        return normalized

    @field_validator("profile_paths", mode="before")
    @classmethod
    def _parse_profile_paths(cls, value):
        if value is None or value == "":
            return (Path("profiles"),)
        if isinstance(value, (list, tuple)):
            return tuple(Path(str(item)) for item in value)
        if isinstance(value, str):
            parts = [part.strip() for part in value.split(os.pathsep) if part.strip()]
            return tuple(Path(part) for part in parts) or (Path("profiles"),)
        raise TypeError("WTLAUNCH_PROFILE_PATHS must be a list of paths or a path-separated string")

    @field_validator("watch_attempts")
    @classmethod
    def _validate_watch_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("WTLAUNCH_WATCH_ATTEMPTS must be >= 1")
        return value

    @field_validator("watch_interval", "settle_delay")
    @classmethod
    def _validate_non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("watch interval and settle delay must be >= 0")
        return value


@lru_cache(maxsize=1)
def get_settings() -> WtLaunchSettings:
    """Return cached settings instance."""

    settings = WtLaunchSettings()
    settings.profile_paths = tuple(path.expanduser().resolve() for path in settings.profile_paths)
    return settings


__all__ = ["SESSION_MATCH_MODES", "WtLaunchSettings", "get_settings"]
