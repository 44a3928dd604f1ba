"""Per-branch worktree environments with sequential, placed builds."""

__version__ = "0.1.0"

__all__ = ["__version__"]
