"""Launch profile models and loader exports."""

from .loader import LaunchProfile, ProfileLoadError, ProfileLoader
from .models import DEFAULT_PROFILE_ID, builtin_profile

__all__ = [
    "DEFAULT_PROFILE_ID",
    "LaunchProfile",
    "ProfileLoadError",
    "ProfileLoader",
    "builtin_profile",
]
