"""Shared constants for git-worktree-keeper."""

from typing import Dict, List, Tuple


# Managed storage layout
WORKTREES_DIR_NAME = ".worktrees"
LOCK_FILE_NAME = "worktree-tool.lock"

# Default names look like "3-wt"; "3-worktree" is the legacy spelling
DEFAULT_NAME_SUFFIX = "-wt"
NAME_SUFFIXES: Tuple[str, ...] = ("-wt", "-worktree")

# Per-worktree bookkeeping git keeps under the common dir, removed by clear when empty
GIT_BOOKKEEPING_DIRS: Tuple[str, ...] = (
    "worktrees",
    "refs/worktree",
    "logs/refs/worktree",
)


# Retry policy for git's own index/lock contention
RETRY_DEADLINE_SECONDS = 3.0
RETRY_INITIAL_DELAY_MS = 30
RETRY_MAX_DELAY_MS = 500

# Substrings (lowercase) that mark a failure as transient lock contention
LOCK_ERROR_MARKERS: Tuple[str, ...] = (
    "index.lock",
    "another git process seems to be running",
    "could not write new index file",
)

# Matches when every part is present, e.g. "unable to create '.../.git/HEAD.lock'"
LOCK_ERROR_COMBINED_MARKERS: Tuple[Tuple[str, ...], ...] = (
    ("unable to create", "lock", ".git"),
)


# Tools that get a "<tool> create|switch" subcommand, with their baked-in arguments
BUILTIN_COMMAND_ARGS: Dict[str, List[str]] = {
    "codex": ["--dangerously-bypass-approvals-and-sandbox"],
    "claude": ["--dangerously-skip-permissions"],
}


# Configuration and log locations, relative to the home directory
CONFIG_DIR_NAME = ".worktree"
CONFIG_FILE_NAME = "config.toml"
LOG_FILE_NAME = "worktree-keeper.log"

DEFAULT_SHELL = "/bin/sh"

NOT_IN_REPO_MESSAGE = "not in a git repo, doing nothing"


DEFAULT_CONFIG_CONTENTS = """\
# ~/.worktree/config.toml
#
# If a tool has baked-in defaults, your args are appended by default. To replace
# the baked-in defaults entirely, set `replace_defaults = true`.

[commands.codex]
# Built-in defaults:
#   ["--dangerously-bypass-approvals-and-sandbox"]
args = []

[commands.claude]
# Built-in defaults:
#   ["--dangerously-skip-permissions"]
args = []

# Retry tuning for git lock contention (optional).
# [retry]
# deadline_seconds = 3.0
# initial_delay_ms = 30
# max_delay_ms = 500
# extra_lock_markers = []
"""
