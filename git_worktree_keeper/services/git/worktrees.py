"""Worktree operations service for git-worktree-keeper."""

import os
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from git_worktree_keeper.config import RetryPolicy
from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeInfo
from git_worktree_keeper.services.git.gateway import GitGateway
from git_worktree_keeper.services.git.retry import run_with_lock_retry

logger = get_logger(__name__)


def _build_worktree_info(entry: Dict[str, Any], root: Path) -> WorktreeInfo:
    path = Path(entry["path"])
    if not path.is_absolute():
        path = root / path
    return WorktreeInfo(
        path=str(path),
        head=entry.get("HEAD", ""),
        branch_name=entry.get("branch", ""),
        is_main=entry.get("is_main", False),
        is_orphaned=not os.path.exists(path),
    )


def parse_worktree_list(output: str, root: Union[str, Path]) -> List[WorktreeInfo]:
    """Parse ``git worktree list --porcelain`` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached")
        (blank line between worktrees)

    Relative paths are resolved against ``root``.
    """
    root = Path(root)
    worktree_list: List[WorktreeInfo] = []
    current_worktree: Dict[str, Any] = {}

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            # Empty line marks end of worktree entry
            if current_worktree.get("path"):
                worktree_list.append(_build_worktree_info(current_worktree, root))
            current_worktree = {}
            continue

        if line.startswith("worktree "):
            path = line.split(" ", 1)[1].strip()
            if not path:
                continue
            current_worktree["path"] = path
            # First worktree in list is always the main one
            current_worktree["is_main"] = not worktree_list
        elif line.startswith("HEAD "):
            current_worktree["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current_worktree["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current_worktree["branch"] = branch_ref
        elif line == "detached":
            current_worktree["branch"] = ""

    # Handle last entry if no trailing blank line
    if current_worktree.get("path"):
        worktree_list.append(_build_worktree_info(current_worktree, root))

    return worktree_list


class WorktreeService:
    """Service for the git worktree commands the keeper needs."""

    def __init__(self, root: Union[str, Path], retry_policy: Optional[RetryPolicy] = None):
        """Initialize the worktree service.

        Args:
            root: Primary working directory git commands run from
            retry_policy: Backoff settings for add/remove lock contention
        """
        self.root = Path(root)
        self.retry_policy = retry_policy or RetryPolicy()
        self.gateway = GitGateway(self.root)

    def list_worktrees(self) -> List[WorktreeInfo]:
        """Get information about every worktree registered with git.

        Raises:
            GitOperationError: If git cannot list worktrees
        """
        output = self.gateway.output("worktree", "list", "--porcelain")
        worktrees = parse_worktree_list(output, self.root)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def add_worktree(self, path: Union[str, Path]) -> None:
        """Register a new detached worktree at ``path``.

        Raises:
            GitOperationError: If git fails for a non-transient reason or
                lock contention outlasts the retry deadline
        """
        path = str(path)
        result = run_with_lock_retry(
            lambda: self.gateway.run("worktree", "add", "--detach", path),
            self.retry_policy,
        )
        if not result.ok:
            raise GitOperationError("worktree add", message=result.stderr or None)
        logger.info(f"Added worktree at {path}")

    def remove_worktree(self, path: Union[str, Path]) -> None:
        """Force-remove the worktree at ``path``, discarding local modifications.

        Raises:
            GitOperationError: If git fails for a non-transient reason or
                lock contention outlasts the retry deadline
        """
        path = str(path)
        result = run_with_lock_retry(
            lambda: self.gateway.run("worktree", "remove", "--force", path),
            self.retry_policy,
        )
        if not result.ok:
            raise GitOperationError("worktree remove", path, result.stderr or None)
        logger.info(f"Removed worktree at {path}")

    def prune_worktrees(self) -> tuple[bool, Optional[str]]:
        """Prune stale worktree metadata.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            result = self.gateway.run("worktree", "prune")
        except GitOperationError as e:
            return False, str(e)
        if not result.ok:
            error_msg = f"git worktree prune failed (exit {result.status}): {result.stderr}"
            logger.debug(error_msg)
            return False, error_msg
        logger.info("Pruned stale worktree metadata")
        return True, None
