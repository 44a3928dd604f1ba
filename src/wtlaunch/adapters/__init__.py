"""Adapters for the external tools wtlaunch drives."""

from .aerospace import AerospaceInventory, AerospaceMover, parse_window_listing
from .git import GitClient, GitError
from .tmux import TmuxClient, TmuxError

__all__ = [
    "AerospaceInventory",
    "AerospaceMover",
    "GitClient",
    "GitError",
    "TmuxClient",
    "TmuxError",
    "parse_window_listing",
]
