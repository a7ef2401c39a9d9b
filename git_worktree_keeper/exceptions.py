"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class RepositoryError(WorktreeKeeperError):
    """Exception raised when git reports a repository layout we cannot use."""
    pass


class InvalidWorktreeName(WorktreeKeeperError):
    """Exception raised for names that are not a single ordinary path segment."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"invalid worktree name '{name}'")


class WorktreeExistsError(WorktreeKeeperError):
    """Exception raised when creating a worktree that already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"worktree '{name}' already exists")


class WorktreePathError(WorktreeKeeperError):
    """Exception raised when the target path is taken by something other than a directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"worktree path exists and is not a directory: {path}")


class WorktreeNotFoundError(WorktreeKeeperError):
    """Exception raised when switching to a worktree that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"worktree '{name}' does not exist")


class GitOperationError(WorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, path: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.path = path
        self.message = message

        error_msg = f"git {operation} failed"
        if path:
            error_msg += f" for {path}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class LockError(WorktreeKeeperError):
    """Exception raised when the repository lock file cannot be opened or locked."""
    pass


class LaunchError(WorktreeKeeperError):
    """Exception raised when a command or shell cannot be started."""

    def __init__(self, program: str, message: Optional[str] = None):
        self.program = program
        self.message = message

        error_msg = f"failed to run {program}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class ConfigError(WorktreeKeeperError):
    """Exception raised for unreadable or invalid configuration files."""
    pass
