"""Tests for the repository lock"""
import fcntl

import pytest

from git_worktree_keeper.exceptions import LockError
from git_worktree_keeper.utils.locking import repo_lock


def try_lock(path):
    """Try to take the lock from a separate open file; True if it was free."""
    with open(path, "a+") as f:
        try:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return True


class TestRepoLock:
    """Test acquisition and release of the repository lock."""

    def test_creates_parent_directories_and_file(self, temp_dir):
        lock_path = temp_dir / "a" / "b" / "worktree-tool.lock"
        with repo_lock(lock_path) as held:
            assert held == lock_path
            assert lock_path.exists()

    def test_excludes_other_holders(self, temp_dir):
        """Test the lock is held inside the block and free afterwards."""
        lock_path = temp_dir / "worktree-tool.lock"
        with repo_lock(lock_path):
            assert try_lock(lock_path) is False
        assert try_lock(lock_path) is True

    def test_released_on_exception(self, temp_dir):
        lock_path = temp_dir / "worktree-tool.lock"
        with pytest.raises(RuntimeError):
            with repo_lock(lock_path):
                raise RuntimeError("boom")
        assert try_lock(lock_path) is True

    def test_open_failure_is_an_error(self, temp_dir):
        """Test an unusable lock path raises instead of proceeding unlocked."""
        blocker = temp_dir / "file"
        blocker.write_text("")
        with pytest.raises(LockError, match="failed to open"):
            with repo_lock(blocker / "worktree-tool.lock"):
                pass  # pragma: no cover
