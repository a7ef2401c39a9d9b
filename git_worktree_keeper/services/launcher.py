"""Run a command or an interactive shell inside a worktree."""

import os
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from git_worktree_keeper.constants import DEFAULT_SHELL
from git_worktree_keeper.exceptions import LaunchError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.command import CommandSpec, LaunchResult
from git_worktree_keeper.services.display_service import print_plain

logger = get_logger(__name__)


def default_shell() -> str:
    """$SHELL, then %COMSPEC%, then /bin/sh."""
    return os.environ.get("SHELL") or os.environ.get("COMSPEC") or DEFAULT_SHELL


def run_process(argv: List[str], cwd: Union[str, Path]) -> LaunchResult:
    """Run ``argv`` in ``cwd`` with inherited stdio and wait for it.

    Raises:
        LaunchError: If the program cannot be started
    """
    program = argv[0]
    logger.debug(f"Launching {argv} in {cwd}")
    try:
        completed = subprocess.run(argv, cwd=str(cwd), check=False)
    except OSError as e:
        raise LaunchError(program, e.strerror or str(e)) from e
    # A negative return code means the child died from a signal
    exit_code = completed.returncode if completed.returncode >= 0 else 128 - completed.returncode
    logger.debug(f"{program} exited with {exit_code}")
    return LaunchResult(program=program, exit_code=exit_code)


def run_shell(path: Union[str, Path]) -> LaunchResult:
    return run_process([default_shell()], path)


def enter(path: Union[str, Path], command: Optional[CommandSpec] = None) -> LaunchResult:
    """Hand the terminal over to ``command`` (or a shell) inside ``path``.

    Changes the process working directory to ``path`` and prints it so that
    wrappers can pick it up. The caller decides what to do with the
    resulting exit code; no shell is started after a command.
    """
    path = Path(path)
    os.chdir(path)
    print_plain(str(path))
    if command is not None:
        return run_process(command.argv(), path)
    return run_shell(path)
