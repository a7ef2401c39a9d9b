"""Worktree data models."""

from dataclasses import dataclass


@dataclass
class WorktreeInfo:
    """Information about a git worktree."""

    path: str
    head: str
    branch_name: str  # Empty for a detached HEAD
    is_main: bool  # Is this the main working tree?
    is_orphaned: bool  # Directory missing?

    @property
    def is_detached(self) -> bool:
        return not self.branch_name

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"
