"""Pytest fixtures for git-worktree-keeper tests"""
import os
import stat
import tempfile
from pathlib import Path

import pytest
import git

from git_worktree_keeper.core import WorktreeKeeper

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def write_script(path: Path, body: str) -> Path:
    """Write an executable /bin/sh script."""
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def read_lines(path: Path) -> list:
    return path.read_text().splitlines()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Resolve so paths compare equal to what git reports (macOS /private/var)
        yield Path(tmpdir).resolve()


@pytest.fixture
def home(temp_dir, monkeypatch):
    """Point HOME at an empty directory so no real config is read."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def repo_path(git_repo):
    return Path(git_repo.working_dir)


@pytest.fixture
def shell_log(temp_dir, monkeypatch):
    """Install a fake $SHELL that records the directory it was started in.

    Returns the log path; the file only exists if the shell ran.
    """
    log = temp_dir / "shell.log"
    shell = write_script(
        temp_dir / "fake-shell",
        'if [ -n "$WORKTREE_SHELL_LOG" ]; then pwd -P > "$WORKTREE_SHELL_LOG"; fi\n',
    )
    monkeypatch.setenv("SHELL", str(shell))
    monkeypatch.setenv("WORKTREE_SHELL_LOG", str(log))
    return log


@pytest.fixture
def fake_tool(temp_dir, monkeypatch):
    """Factory for fake programs on PATH that log their cwd and arguments.

    The log's first line is the working directory, then one argument per line.
    """
    bin_dir = temp_dir / "bin"
    bin_dir.mkdir(exist_ok=True)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")

    def _make(name: str, exit_code: int = 0) -> Path:
        log = temp_dir / f"{name}.log"
        write_script(
            bin_dir / name,
            f'pwd -P > "{log}"\n'
            f'for arg in "$@"; do printf "%s\\n" "$arg" >> "{log}"; done\n'
            f"exit {exit_code}\n",
        )
        return log

    return _make


@pytest.fixture
def in_repo(repo_path, home, shell_log, monkeypatch):
    """Run from the repository root with a fake shell and isolated HOME."""
    monkeypatch.chdir(repo_path)
    return repo_path


@pytest.fixture
def keeper(in_repo):
    """WorktreeKeeper for the test repository."""
    keeper = WorktreeKeeper.discover(in_repo)
    assert keeper is not None
    return keeper


@pytest.fixture
def outside_repo(temp_dir, home, monkeypatch):
    """A directory git will not treat as part of any repository."""
    path = temp_dir / "not_a_repo"
    path.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(temp_dir))
    monkeypatch.chdir(path)
    return path


@pytest.fixture
def cli_env(home, shell_log):
    """Factory for the environment of a CLI subprocess, taken from the current os.environ."""

    def _env():
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))
        return env

    return _env
