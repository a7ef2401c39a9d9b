"""Locate the repository the tool was invoked from."""

import os
from pathlib import Path
from typing import Optional, Union

from git_worktree_keeper.exceptions import RepositoryError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import Repository
from git_worktree_keeper.services.git.gateway import GitGateway

logger = get_logger(__name__)


def resolve_start_dir() -> Path:
    """Current working directory, recovering when it has been deleted.

    If the directory we were started in no longer exists, climb ``$PWD`` to
    the nearest existing ancestor and change into it.

    Raises:
        RepositoryError: If no existing ancestor can be determined
    """
    try:
        return Path(os.getcwd())
    except FileNotFoundError:
        pass

    pwd = os.environ.get("PWD")
    if not pwd or not os.path.isabs(pwd):
        raise RepositoryError("current directory no longer exists and $PWD is not set")

    candidate = Path(pwd)
    while not candidate.is_dir():
        if candidate.parent == candidate:
            raise RepositoryError(f"no existing ancestor of {pwd}")
        candidate = candidate.parent

    logger.warning(f"Current directory {pwd} no longer exists, using {candidate}")
    os.chdir(candidate)
    return candidate


def discover(start_dir: Optional[Union[str, Path]] = None) -> Optional[Repository]:
    """Find the repository containing ``start_dir``.

    Git already searches parent directories, so a single
    ``git rev-parse --git-common-dir`` from any subdirectory or linked
    worktree resolves the shared metadata directory.

    Args:
        start_dir: Directory to search from (defaults to the current directory)

    Returns:
        The Repository, or None when ``start_dir`` is not inside one

    Raises:
        RepositoryError: If git reports a common dir whose parent does not exist
    """
    start = Path(start_dir) if start_dir is not None else resolve_start_dir()
    gateway = GitGateway(start)
    result = gateway.run("rev-parse", "--path-format=absolute", "--git-common-dir")
    if not result.ok or not result.stdout:
        logger.debug(f"{start} is not inside a git repository: {result.stderr}")
        return None

    metadata_dir = Path(result.stdout)
    root = metadata_dir.parent
    if not root.is_dir():
        raise RepositoryError(
            f"repository root {root} for git dir {metadata_dir} does not exist"
        )
    logger.debug(f"Found repository at {root} (git dir {metadata_dir})")
    return Repository(root=root, metadata_dir=metadata_dir)
