"""Repository model."""

from dataclasses import dataclass
from pathlib import Path

from git_worktree_keeper.constants import LOCK_FILE_NAME, WORKTREES_DIR_NAME


@dataclass(frozen=True)
class Repository:
    """A git repository located from the current working directory."""

    root: Path  # Primary working directory, parent of the common dir
    metadata_dir: Path  # Common git dir, shared by every worktree

    @property
    def managed_dir(self) -> Path:
        """Directory holding the managed worktrees."""
        return self.root / WORKTREES_DIR_NAME

    @property
    def lock_path(self) -> Path:
        return self.metadata_dir / LOCK_FILE_NAME

    def worktree_path(self, name: str) -> Path:
        """Path of the managed worktree called ``name`` (not validated)."""
        return self.managed_dir / name

    def is_managed(self, path: Path) -> bool:
        """Check whether ``path`` lies strictly under the managed worktrees directory.

        Both the literal and the symlink-resolved forms are compared, since git
        may report either.
        """
        path = Path(path)
        for candidate, managed in (
            (path, self.managed_dir),
            (path.resolve(), self.managed_dir.resolve()),
        ):
            if candidate != managed and managed in candidate.parents:
                return True
        return False
