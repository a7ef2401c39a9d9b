"""Core functionality for git-worktree-keeper"""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Union

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import GIT_BOOKKEEPING_DIRS
from git_worktree_keeper.exceptions import (
    GitOperationError,
    WorktreeExistsError,
    WorktreeKeeperError,
    WorktreeNotFoundError,
    WorktreePathError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.command import CommandSpec, LaunchResult
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.services import launcher, repository_locator
from git_worktree_keeper.services.git.worktrees import WorktreeService
from git_worktree_keeper.services.naming import next_worktree_name, validate_worktree_name
from git_worktree_keeper.utils.locking import repo_lock

logger = get_logger(__name__)


def _remove_dir_if_empty(path: Path) -> bool:
    """Remove ``path`` if it is an empty directory. Returns True if removed."""
    if not path.is_dir():
        return False
    try:
        if any(path.iterdir()):
            return False
        path.rmdir()
    except OSError as e:
        raise WorktreeKeeperError(f"failed to remove {path}: {e}") from e
    logger.debug(f"Removed empty {path}")
    return True


class WorktreeKeeper:
    """Creates, enters, lists and clears the managed worktrees of one repository.

    Managed worktrees live in ``<root>/.worktrees/<name>`` and are always
    registered with git. Mutations (create, clear) run under a lock file in
    the repository's common git dir so concurrent invocations against the
    same repository, from any of its worktrees, are serialized.
    """

    def __init__(self, repository: Repository, config: Optional[Config] = None):
        """Initialize WorktreeKeeper.

        Args:
            repository: The located repository
            config: Configuration (defaults if omitted)
        """
        self.repository = repository
        self.config = config or Config()
        self.worktree_service = WorktreeService(repository.root, self.config.retry)

    @classmethod
    def discover(
        cls,
        start_dir: Optional[Union[str, Path]] = None,
        config: Optional[Config] = None,
    ) -> Optional["WorktreeKeeper"]:
        """Build a keeper for the repository containing ``start_dir``, or None outside one."""
        repository = repository_locator.discover(start_dir)
        if repository is None:
            return None
        return cls(repository, config)

    @property
    def managed_dir(self) -> Path:
        return self.repository.managed_dir

    def _check_available(self, name: str, path: Path) -> None:
        if path.is_dir():
            raise WorktreeExistsError(name)
        if os.path.lexists(path):
            raise WorktreePathError(str(path))

    def create_worktree(self, name: Optional[str] = None) -> Path:
        """Create a managed worktree with a detached HEAD and return its path.

        Without a name, the next default name is chosen while holding the
        repository lock, so concurrent creators never pick the same one.

        Raises:
            InvalidWorktreeName: If ``name`` is not a single path segment
            WorktreeExistsError: If the worktree already exists
            WorktreePathError: If the target path is taken by a non-directory
            GitOperationError: If ``git worktree add`` fails
        """
        self.managed_dir.mkdir(parents=True, exist_ok=True)
        if name is not None:
            validate_worktree_name(name)
            self._check_available(name, self.repository.worktree_path(name))

        with repo_lock(self.repository.lock_path):
            if name is None:
                name = next_worktree_name(self.managed_dir)
            path = self.repository.worktree_path(name)
            # Another process may have created it while we waited for the lock
            self._check_available(name, path)
            self.worktree_service.add_worktree(path)

        logger.info(f"Created worktree '{name}' at {path}")
        return path

    def create(self, name: Optional[str] = None, command: Optional[CommandSpec] = None) -> LaunchResult:
        """Create a worktree and enter it."""
        path = self.create_worktree(name)
        return self.enter(path, command)

    def resolve_worktree(self, name: str) -> Path:
        """Path of the existing managed worktree ``name``.

        Raises:
            InvalidWorktreeName: If ``name`` is not a single path segment
            WorktreeNotFoundError: If no such worktree directory exists
        """
        validate_worktree_name(name)
        path = self.repository.worktree_path(name)
        if not path.is_dir():
            raise WorktreeNotFoundError(name)
        return path

    def switch(self, name: str, command: Optional[CommandSpec] = None) -> LaunchResult:
        """Enter an existing worktree. Read-only, so no lock is taken."""
        return self.enter(self.resolve_worktree(name), command)

    def list_names(self) -> List[str]:
        """Names of the managed worktrees, sorted."""
        if not self.managed_dir.is_dir():
            return []
        return sorted(entry.name for entry in self.managed_dir.iterdir() if entry.is_dir())

    def clear_worktrees(self) -> List[Path]:
        """Remove every managed worktree and the bookkeeping git no longer needs.

        Worktrees registered outside the managed directory are left alone.
        A managed worktree git refuses to remove is skipped with a warning;
        the managed directory is deleted from disk regardless.

        Returns:
            Paths git unregistered
        """
        removed: List[Path] = []
        with repo_lock(self.repository.lock_path):
            for worktree in self.worktree_service.list_worktrees():
                path = Path(worktree.path)
                if not self.repository.is_managed(path):
                    logger.debug(f"Keeping foreign worktree {path}")
                    continue
                try:
                    self.worktree_service.remove_worktree(path)
                except GitOperationError as e:
                    logger.warning(f"Skipping {path}: {e}")
                    continue
                removed.append(path)

            if self.managed_dir.exists():
                try:
                    shutil.rmtree(self.managed_dir)
                except OSError as e:
                    raise WorktreeKeeperError(f"failed to remove {self.managed_dir}: {e}") from e
                logger.debug(f"Deleted {self.managed_dir}")

            success, error_msg = self.worktree_service.prune_worktrees()
            if not success:
                logger.debug(f"Ignoring prune failure: {error_msg}")

            for relative in GIT_BOOKKEEPING_DIRS:
                _remove_dir_if_empty(self.repository.metadata_dir / relative)

        logger.info(f"Cleared {len(removed)} worktrees")
        return removed

    def clear(self) -> LaunchResult:
        """Clear all managed worktrees, then start a shell at the repository root.

        Moves to the root first so we never delete the directory we are
        standing in.
        """
        os.chdir(self.repository.root)
        self.clear_worktrees()
        return launcher.run_shell(self.repository.root)

    def enter(self, path: Path, command: Optional[CommandSpec] = None) -> LaunchResult:
        return launcher.enter(path, command)
