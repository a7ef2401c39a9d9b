"""Utility functions for git-worktree-keeper.

This package provides utility modules:
- locking: Cross-process repository lock
"""

from .locking import repo_lock

__all__ = ["repo_lock"]
