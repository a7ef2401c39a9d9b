"""
git-worktree-keeper - Disposable git worktrees with locking and retries
"""

from .__version__ import __version__
from .core import WorktreeKeeper
from .cli.main import main

__all__ = ["WorktreeKeeper", "main", "__version__"]
