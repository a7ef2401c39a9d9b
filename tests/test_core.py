"""Tests for the worktree lifecycle"""
import os
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest

from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import (
    GitOperationError,
    InvalidWorktreeName,
    WorktreeExistsError,
    WorktreeNotFoundError,
    WorktreePathError,
)
from git_worktree_keeper.models.command import CommandSpec


def registered_paths(git_repo):
    output = git_repo.git.worktree("list", "--porcelain")
    return [Path(line.split(" ", 1)[1]) for line in output.splitlines() if line.startswith("worktree ")]


class TestCreate:
    """Test creating managed worktrees."""

    def test_named_worktree(self, keeper, repo_path, git_repo):
        path = keeper.create_worktree("feature")
        assert path == repo_path / ".worktrees" / "feature"
        assert path.is_dir()
        assert (repo_path / ".git" / "worktrees" / "feature").is_dir()
        assert path in registered_paths(git_repo)

    def test_sequential_default_names(self, keeper):
        assert keeper.create_worktree().name == "0-wt"
        assert keeper.create_worktree().name == "1-wt"
        assert keeper.list_names() == ["0-wt", "1-wt"]

    def test_default_name_skips_gaps(self, keeper, repo_path):
        keeper.create_worktree("0-wt")
        keeper.create_worktree("2-wt")
        assert keeper.create_worktree().name == "3-wt"

    def test_duplicate_fails_without_changes(self, keeper, git_repo):
        """Test creating the same name twice fails and leaves state alone."""
        keeper.create_worktree("feature")
        before = registered_paths(git_repo)
        with pytest.raises(WorktreeExistsError, match="worktree 'feature' already exists"):
            keeper.create_worktree("feature")
        assert registered_paths(git_repo) == before
        assert keeper.list_names() == ["feature"]

    def test_target_is_a_file(self, keeper, repo_path):
        managed = repo_path / ".worktrees"
        managed.mkdir()
        (managed / "feature").write_text("not a dir")
        with pytest.raises(WorktreePathError, match="is not a directory"):
            keeper.create_worktree("feature")

    @pytest.mark.parametrize("name", ["../oops", ".", "..", "a/b", ""])
    def test_invalid_names(self, keeper, repo_path, name):
        with pytest.raises(InvalidWorktreeName):
            keeper.create_worktree(name)
        assert not (repo_path.parent / "oops").exists()
        assert not (repo_path / ".worktrees" / "a").exists()

    def test_from_subdirectory_uses_root(self, repo_path, in_repo, monkeypatch):
        subdir = repo_path / "a" / "b"
        subdir.mkdir(parents=True)
        monkeypatch.chdir(subdir)
        keeper = WorktreeKeeper.discover()
        keeper.create_worktree("feature")
        assert (repo_path / ".worktrees" / "feature").is_dir()
        assert not (subdir / ".worktrees").exists()

    def test_nested_invocation_uses_root(self, keeper, repo_path):
        """Test creating from inside a managed worktree targets the primary root."""
        feature = keeper.create_worktree("feature")
        nested = WorktreeKeeper.discover(feature)
        nested.create_worktree("other")
        assert (repo_path / ".worktrees" / "other").is_dir()
        assert not (feature / ".worktrees").exists()

    def test_git_failure_is_surfaced(self, keeper):
        with patch.object(
            keeper.worktree_service,
            "add_worktree",
            side_effect=GitOperationError("worktree add", message="fatal: boom"),
        ):
            with pytest.raises(GitOperationError, match="fatal: boom"):
                keeper.create_worktree("feature")


class TestCreateAndEnter:
    """Test create/switch handing over to a shell or command."""

    def test_create_starts_shell_in_worktree(self, keeper, shell_log, repo_path, capsys):
        result = keeper.create("feature")
        expected = repo_path / ".worktrees" / "feature"
        assert result.exit_code == 0
        assert Path(shell_log.read_text().strip()) == expected
        assert Path(os.getcwd()) == expected
        assert capsys.readouterr().out.strip() == str(expected)

    def test_command_exit_code_and_no_shell(self, keeper, shell_log, fake_tool, repo_path):
        """Test a failing command's code is returned and no shell follows."""
        log = fake_tool("wt-cmd", exit_code=42)
        result = keeper.create("feature", CommandSpec("wt-cmd", ["--flag"]))
        assert result.exit_code == 42
        assert not shell_log.exists()
        lines = log.read_text().splitlines()
        assert Path(lines[0]) == repo_path / ".worktrees" / "feature"
        assert lines[1:] == ["--flag"]

    def test_switch_round_trip(self, keeper, shell_log):
        """Test switch resolves to the same path create produced."""
        created = keeper.create_worktree("feature")
        assert keeper.resolve_worktree("feature") == created
        result = keeper.switch("feature")
        assert result.exit_code == 0
        assert Path(shell_log.read_text().strip()) == created

    def test_switch_missing(self, keeper):
        with pytest.raises(WorktreeNotFoundError, match="worktree 'dne' does not exist"):
            keeper.switch("dne")

    def test_switch_to_file_is_missing(self, keeper, repo_path):
        managed = repo_path / ".worktrees"
        managed.mkdir()
        (managed / "feature").write_text("not a dir")
        with pytest.raises(WorktreeNotFoundError):
            keeper.switch("feature")

    def test_switch_rejects_traversal(self, keeper, repo_path):
        (repo_path.parent / "outside").mkdir()
        with pytest.raises(InvalidWorktreeName):
            keeper.switch("../outside")


class TestList:
    """Test listing managed worktrees."""

    def test_no_managed_directory(self, keeper):
        assert keeper.list_names() == []

    def test_sorted(self, keeper):
        keeper.create_worktree("b")
        keeper.create_worktree("a")
        assert keeper.list_names() == ["a", "b"]

    def test_ignores_files(self, keeper, repo_path):
        keeper.create_worktree("a")
        (repo_path / ".worktrees" / "notes.txt").write_text("")
        assert keeper.list_names() == ["a"]


class TestClear:
    """Test clearing managed worktrees."""

    def test_removes_everything_managed(self, keeper, repo_path, git_repo):
        keeper.create_worktree("one")
        keeper.create_worktree("two")

        removed = keeper.clear_worktrees()

        assert sorted(p.name for p in removed) == ["one", "two"]
        assert not (repo_path / ".worktrees").exists()
        assert not (repo_path / ".git" / "worktrees").exists()
        assert not (repo_path / ".git" / "refs" / "worktree").exists()
        assert not (repo_path / ".git" / "logs" / "refs" / "worktree").exists()
        assert registered_paths(git_repo) == [repo_path]

    def test_keeps_foreign_worktrees(self, keeper, repo_path, git_repo):
        """Test worktrees outside .worktrees keep their directory and registration."""
        keeper.create_worktree("one")
        foreign = repo_path / "foreign"
        git_repo.git.worktree("add", "--detach", str(foreign))

        keeper.clear_worktrees()

        assert foreign.is_dir()
        assert (repo_path / ".git" / "worktrees" / "foreign").is_dir()
        assert foreign in registered_paths(git_repo)
        assert not (repo_path / ".worktrees").exists()

    def test_tolerates_removal_failure(self, keeper, repo_path):
        """Test one worktree git refuses to remove does not abort the clear."""
        keeper.create_worktree("one")
        keeper.create_worktree("two")
        real_remove = keeper.worktree_service.remove_worktree

        def remove(path):
            if Path(path).name == "one":
                raise GitOperationError("worktree remove", str(path), "fatal: not a working tree")
            return real_remove(path)

        with patch.object(keeper.worktree_service, "remove_worktree", side_effect=remove):
            removed = keeper.clear_worktrees()

        assert [p.name for p in removed] == ["two"]
        assert not (repo_path / ".worktrees").exists()

    def test_manually_deleted_worktree_is_pruned(self, keeper, repo_path, git_repo):
        keeper.create_worktree("one")
        shutil.rmtree(repo_path / ".worktrees" / "one")
        keeper.clear_worktrees()
        assert registered_paths(git_repo) == [repo_path]

    def test_nothing_to_clear(self, keeper, repo_path):
        assert keeper.clear_worktrees() == []
        assert not (repo_path / ".worktrees").exists()

    def test_clear_from_worktree_returns_to_root(self, keeper, repo_path, shell_log, monkeypatch):
        one = keeper.create_worktree("one")
        monkeypatch.chdir(one)
        result = keeper.clear()
        assert result.exit_code == 0
        assert Path(shell_log.read_text().strip()) == repo_path
        assert Path(os.getcwd()) == repo_path
