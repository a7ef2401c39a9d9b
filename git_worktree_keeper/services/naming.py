"""Worktree name validation and default name generation."""

import os
from pathlib import Path
from typing import Optional, Union

from git_worktree_keeper.constants import DEFAULT_NAME_SUFFIX, NAME_SUFFIXES
from git_worktree_keeper.exceptions import InvalidWorktreeName

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep, "/") if sep)


def validate_worktree_name(name: str) -> str:
    """Ensure ``name`` is exactly one ordinary path segment.

    Rejects the empty string, ``.``, ``..``, absolute paths and anything
    containing a path separator.

    Returns:
        The name, unchanged

    Raises:
        InvalidWorktreeName: If the name would escape or nest inside the managed directory
    """
    if not name or name in (".", ".."):
        raise InvalidWorktreeName(name)
    if any(sep in name for sep in _SEPARATORS):
        raise InvalidWorktreeName(name)
    path = Path(name)
    if path.is_absolute() or path.anchor or len(path.parts) != 1:
        raise InvalidWorktreeName(name)
    return name


def worktree_index(name: str) -> Optional[int]:
    """Index encoded in a default name (``3-wt`` or legacy ``3-worktree``), else None."""
    for suffix in NAME_SUFFIXES:
        if name.endswith(suffix):
            prefix = name[: -len(suffix)]
            if prefix.isdigit() and prefix.isascii():
                return int(prefix)
            return None
    return None


def next_worktree_name(managed_dir: Union[str, Path]) -> str:
    """Next default name: one past the highest index in use, ``0-wt`` if none.

    Based on the maximum rather than the count, so gaps left by deleted
    worktrees are never refilled.
    """
    managed_dir = Path(managed_dir)
    highest = None
    if managed_dir.is_dir():
        with os.scandir(managed_dir) as entries:
            for entry in entries:
                if not entry.is_dir():
                    continue
                index = worktree_index(entry.name)
                if index is not None and (highest is None or index > highest):
                    highest = index
    next_index = 0 if highest is None else highest + 1
    return f"{next_index}{DEFAULT_NAME_SUFFIX}"
