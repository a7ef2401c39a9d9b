"""Data models for git-worktree-keeper."""

from .repository import Repository
from .worktree import WorktreeInfo
from .command import CommandSpec, LaunchResult

__all__ = ["Repository", "WorktreeInfo", "CommandSpec", "LaunchResult"]
