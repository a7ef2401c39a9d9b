"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from typing import List, Optional, Sequence, Tuple

from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.constants import BUILTIN_COMMAND_ARGS

PROG = "git-worktree-keeper"


def split_name_and_tail(tokens: Sequence[str]) -> Tuple[Optional[str], List[str]]:
    """Split ``[NAME] [--] [ARGS...]`` into the optional name and the rest.

    A leading ``--`` means no name was given; a ``--`` right after the name
    is dropped.
    """
    tokens = list(tokens)
    if not tokens:
        return None, []
    if tokens[0] == "--":
        return None, tokens[1:]
    name, tail = tokens[0], tokens[1:]
    if tail and tail[0] == "--":
        tail = tail[1:]
    return name, tail


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-parser per command."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Helper for git worktrees",
        epilog="Worktrees are kept in <repo root>/.worktrees. "
        "Tool arguments are read from ~/.worktree/config.toml (see 'init').",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"{PROG} {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # argparse.REMAINDER cannot start with an option-like token, so the
    # optional name and the command are parsed from one remainder.
    create = subparsers.add_parser(
        "create",
        help="Create a new worktree",
        description="Create a new worktree and open a shell (or run COMMAND) inside it.",
        usage=f"{PROG} create [NAME] [[--] COMMAND ...]",
    )
    create.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    switch = subparsers.add_parser(
        "switch",
        help="Switch to an existing worktree",
        description="Open a shell (or run COMMAND) inside an existing worktree.",
    )
    switch.add_argument("name", metavar="NAME", help="Worktree name")
    switch.add_argument(
        "tail", nargs=argparse.REMAINDER, metavar="COMMAND", help="Command to run instead of a shell"
    )

    for tool in BUILTIN_COMMAND_ARGS:
        tool_parser = subparsers.add_parser(
            tool,
            help=f"Run {tool} inside a worktree",
            description=f"Run {tool} with its configured arguments inside a worktree.",
        )
        actions = tool_parser.add_subparsers(dest="tool_action", metavar="ACTION", required=True)
        tool_create = actions.add_parser(
            "create",
            help=f"Create a new worktree and run {tool} in it",
            usage=f"{PROG} {tool} create [NAME] [[--] ARGS ...]",
        )
        tool_create.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)
        tool_switch = actions.add_parser(
            "switch", help=f"Run {tool} in an existing worktree"
        )
        tool_switch.add_argument("name", metavar="NAME", help="Worktree name")
        tool_switch.add_argument(
            "tail", nargs=argparse.REMAINDER, metavar="ARGS", help=f"Extra arguments for {tool}"
        )

    subparsers.add_parser("list", help="List existing worktrees")
    subparsers.add_parser("clear", help="Clear all .worktrees worktrees")
    subparsers.add_parser("init", help="Initialize configuration")

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    The result always has ``name`` and ``tail`` for create/switch style
    commands, with the optional-name remainder already split.
    """
    parsed_args = build_parser().parse_args(argv)
    if hasattr(parsed_args, "args"):
        parsed_args.name, parsed_args.tail = split_name_and_tail(parsed_args.args)
        del parsed_args.args
    elif hasattr(parsed_args, "tail") and parsed_args.tail and parsed_args.tail[0] == "--":
        parsed_args.tail = parsed_args.tail[1:]
    return parsed_args
