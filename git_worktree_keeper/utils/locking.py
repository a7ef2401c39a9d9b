"""Cross-process repository lock built on POSIX advisory file locks."""

import fcntl
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from git_worktree_keeper.exceptions import LockError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@contextmanager
def repo_lock(path: Union[str, Path]) -> Iterator[Path]:
    """Hold an exclusive lock on ``path`` for the duration of the block.

    Creates the parent directories and the lock file when missing, then
    blocks until ``fcntl.flock`` grants ``LOCK_EX``. The lock is released when
    the block exits, and by the OS if the process dies while holding it.

    Args:
        path: Lock file path

    Yields:
        The lock file path

    Raises:
        LockError: If the lock file cannot be created, opened or locked
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        lock_file = open(path, "a+")
    except OSError as e:
        raise LockError(f"failed to open {path}: {e}") from e

    try:
        try:
            logger.debug(f"Waiting for lock {path}")
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        except OSError as e:
            raise LockError(f"failed to lock {path}: {e}") from e
        logger.debug(f"Acquired lock {path}")
        try:
            yield path
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            logger.debug(f"Released lock {path}")
    finally:
        lock_file.close()
