"""Profile loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import yaml
from pydantic import ValidationError

from .models import DEFAULT_PROFILE_ID, LaunchProfile, builtin_profile

PROFILE_SUFFIXES = (".yml", ".yaml")


class ProfileLoadError(RuntimeError):
    """Raised when profile files cannot be parsed or a profile is unknown."""


def _profile_files(base: Path) -> list[Path]:
    if not base.is_dir():
        return []
    return sorted(path for path in base.iterdir() if path.suffix in PROFILE_SUFFIXES and path.is_file())


class ProfileLoader:
    """Loads launch profiles from YAML files on disk."""

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.exists()]

    @property
    def search_paths(self) -> list[Path]:
        """Return the normalized search paths."""

        return list(self._search_paths)

    def load_all(self) -> dict[str, LaunchProfile]:
        """Load profiles from all configured search paths.

        Later search paths override earlier ones when profile ids collide.
        """

        if not self._search_paths:
            return {}

        profiles: dict[str, LaunchProfile] = {}
        errors: list[str] = []

        for base in self._search_paths:
            for path in _profile_files(base):
                try:
                    document = yaml.safe_load(path.read_text(encoding="utf-8"))
                except yaml.YAMLError as exc:
                    errors.append(f"Failed to parse YAML in {path}: {exc}")
                    continue

                if document is None:
                    continue

                try:
                    profile = LaunchProfile.model_validate(document)
                except ValidationError as exc:
                    errors.append(f"Profile validation error in {path}: {exc}")
                    continue

                profiles[profile.id] = profile

        if errors:
            raise ProfileLoadError("; ".join(errors))

        return profiles

    def get(self, profile_id: str) -> LaunchProfile:
        """Return a single profile by id, falling back to the built-in default."""

        profiles = self.load_all()
        if profile_id in profiles:
            return profiles[profile_id]
        if profile_id == DEFAULT_PROFILE_ID:
            return builtin_profile()
        raise ProfileLoadError(f"Profile '{profile_id}' not found in search paths")


__all__ = ["LaunchProfile", "ProfileLoadError", "ProfileLoader"]
