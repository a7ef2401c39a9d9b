"""Git-related services for git-worktree-keeper."""

from .gateway import GitGateway, GitResult
from .retry import is_git_lock_error, run_with_lock_retry
from .worktrees import WorktreeService, parse_worktree_list

__all__ = [
    "GitGateway",
    "GitResult",
    "is_git_lock_error",
    "run_with_lock_retry",
    "WorktreeService",
    "parse_worktree_list",
]
