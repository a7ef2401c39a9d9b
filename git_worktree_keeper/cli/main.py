"""Command-line interface for git-worktree-keeper"""

import argparse
import sys
from typing import Optional, Sequence

from git_worktree_keeper.cli.args import build_parser, parse_args
from git_worktree_keeper.config import Config, display_path
from git_worktree_keeper.constants import BUILTIN_COMMAND_ARGS, NOT_IN_REPO_MESSAGE
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import ConfigError, WorktreeKeeperError
from git_worktree_keeper.logging_config import get_logger, setup_logging
from git_worktree_keeper.models.command import CommandSpec
from git_worktree_keeper.services import repository_locator
from git_worktree_keeper.services.display_service import (
    error_console,
    print_error,
    print_names,
    print_plain,
    print_warning,
)

logger = get_logger(__name__)


def _load_config(strict: bool) -> Config:
    """Load the user config.

    Tool commands need their arguments, so a broken file is an error for
    them; other commands only read retry tuning and fall back to defaults.
    """
    try:
        return Config.load()
    except ConfigError as e:
        if strict:
            raise
        print_warning(f"Ignoring config: {e}")
        return Config()


def run(parsed_args: argparse.Namespace) -> int:
    """Dispatch a parsed command line and return the process exit code."""
    command = parsed_args.command

    if command == "init":
        path = Config.init_default()
        print_plain(f"initialized config at {display_path(path)}")
        return 0

    repository = repository_locator.discover()
    if repository is None:
        print_plain(NOT_IN_REPO_MESSAGE)
        return 0

    is_tool = command in BUILTIN_COMMAND_ARGS
    keeper = WorktreeKeeper(repository, _load_config(strict=is_tool))

    if is_tool:
        spec = CommandSpec(
            program=command,
            args=keeper.config.command_args(command, parsed_args.tail),
        )
        if parsed_args.tool_action == "create":
            result = keeper.create(parsed_args.name, spec)
        else:
            result = keeper.switch(parsed_args.name, spec)
    elif command == "create":
        result = keeper.create(parsed_args.name, CommandSpec.from_tail(parsed_args.tail))
    elif command == "switch":
        result = keeper.switch(parsed_args.name, CommandSpec.from_tail(parsed_args.tail))
    elif command == "list":
        print_names(keeper.list_names())
        return 0
    elif command == "clear":
        result = keeper.clear()
    else:
        raise WorktreeKeeperError(f"unknown command '{command}'")

    # The child's exit code is ours, without an error message of our own
    if not result.success:
        logger.debug(f"{result.program} exited with {result.exit_code}")
    return result.exit_code


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    if parsed_args.command is None:
        build_parser().print_help(sys.stderr)
        return 2

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        return run(parsed_args)
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 130
    except WorktreeKeeperError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print_error(str(e))
        return 1
    except Exception as e:
        print_error(str(e))
        if parsed_args.debug:
            error_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
