"""Models for processes launched inside a worktree."""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass
class CommandSpec:
    """A program and its arguments to run instead of an interactive shell."""

    program: str
    args: List[str] = field(default_factory=list)

    @classmethod
    def from_tail(cls, tail: Sequence[str]) -> Optional["CommandSpec"]:
        """Build a command from trailing CLI tokens, or None when there are none.

        A leading ``--`` separator is dropped.
        """
        tokens = list(tail)
        if tokens and tokens[0] == "--":
            tokens = tokens[1:]
        if not tokens:
            return None
        return cls(program=tokens[0], args=tokens[1:])

    def argv(self) -> List[str]:
        return [self.program, *self.args]


@dataclass(frozen=True)
class LaunchResult:
    """Exit status of a command or shell that ran inside a worktree."""

    program: str
    exit_code: int

    @property
    def success(self) -> bool:
        return self.exit_code == 0
