"""Thin wrapper around the git command line."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import git

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GitResult:
    """Exit status and captured output of one git invocation."""

    status: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.status == 0


class GitGateway:
    """Runs git commands from a fixed working directory."""

    def __init__(self, working_dir: Union[str, Path]):
        """Initialize the gateway.

        Args:
            working_dir: Directory git is run from
        """
        self.working_dir = Path(working_dir)

    def _get_git(self) -> git.Git:
        """Get a git command wrapper bound to the working directory.

        A plain ``git.Git`` is used rather than ``git.Repo`` so that commands
        can run before we know whether the directory is inside a repository.
        """
        return git.Git(str(self.working_dir))

    def run(self, *args: str) -> GitResult:
        """Run ``git <args>`` and capture its result without raising on failure.

        Raises:
            GitOperationError: If git itself could not be started
        """
        command = ["git", *args]
        logger.debug(f"Running {' '.join(command)} in {self.working_dir}")
        try:
            status, stdout, stderr = self._get_git().execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
            )
        except git.exc.GitCommandNotFound as e:
            raise GitOperationError(" ".join(args), message=f"could not run git: {e}") from e
        result = GitResult(status=status, stdout=stdout.strip(), stderr=stderr.strip())
        if not result.ok:
            logger.debug(f"git {' '.join(args)} exited {status}: {result.stderr}")
        return result

    def output(self, *args: str) -> str:
        """Run ``git <args>`` and return its trimmed stdout.

        Raises:
            GitOperationError: If git exits non-zero, carrying its stderr
        """
        result = self.run(*args)
        if not result.ok:
            raise GitOperationError(" ".join(args), message=result.stderr or None)
        return result.stdout
