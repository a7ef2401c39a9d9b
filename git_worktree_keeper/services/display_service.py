"""Console output for git-worktree-keeper"""
from typing import Iterable

from rich.console import Console
from rich.markup import escape

console = Console()
error_console = Console(stderr=True)


def print_plain(text: str) -> None:
    """Print text verbatim on stdout (no markup, emoji codes, highlighting or wrapping).

    Used for output other programs parse, such as paths and worktree names.
    """
    console.print(text, markup=False, emoji=False, highlight=False, soft_wrap=True)


def print_names(names: Iterable[str]) -> None:
    for name in names:
        print_plain(name)


def print_error(message: str) -> None:
    error_console.print(f"[red]Error: {escape(message)}[/red]", highlight=False, soft_wrap=True)


def print_warning(message: str) -> None:
    error_console.print(f"[yellow]{escape(message)}[/yellow]", highlight=False, soft_wrap=True)
