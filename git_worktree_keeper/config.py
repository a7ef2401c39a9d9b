"""Configuration handling for git-worktree-keeper"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from git_worktree_keeper.constants import (
    BUILTIN_COMMAND_ARGS,
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_CONTENTS,
    LOCK_ERROR_COMBINED_MARKERS,
    LOCK_ERROR_MARKERS,
    RETRY_DEADLINE_SECONDS,
    RETRY_INITIAL_DELAY_MS,
    RETRY_MAX_DELAY_MS,
)
from git_worktree_keeper.exceptions import ConfigError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def _validate_string_list(name: str, value) -> None:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{name} must be a list of strings, got {value!r}")


@dataclass
class CommandConfig:
    """Per-tool invocation arguments."""

    args: List[str] = field(default_factory=list)
    replace_defaults: bool = False

    def __post_init__(self):
        _validate_string_list("args", self.args)
        if not isinstance(self.replace_defaults, bool):
            raise ValueError(f"replace_defaults must be a boolean, got {self.replace_defaults!r}")


@dataclass
class RetryPolicy:
    """Bounded exponential backoff for git lock contention."""

    deadline_seconds: float = RETRY_DEADLINE_SECONDS
    initial_delay_ms: int = RETRY_INITIAL_DELAY_MS
    max_delay_ms: int = RETRY_MAX_DELAY_MS
    extra_lock_markers: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.deadline_seconds < 0:
            raise ValueError(f"deadline_seconds must not be negative, got {self.deadline_seconds}")
        if self.initial_delay_ms <= 0:
            raise ValueError(f"initial_delay_ms must be positive, got {self.initial_delay_ms}")
        if self.max_delay_ms < self.initial_delay_ms:
            raise ValueError(
                f"max_delay_ms must be at least initial_delay_ms, got {self.max_delay_ms}"
            )
        _validate_string_list("extra_lock_markers", self.extra_lock_markers)

    @property
    def lock_markers(self) -> tuple:
        """Single-substring markers, built-ins first."""
        extra = tuple(marker.lower() for marker in self.extra_lock_markers)
        return LOCK_ERROR_MARKERS + extra

    @property
    def combined_lock_markers(self) -> tuple:
        return LOCK_ERROR_COMBINED_MARKERS


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    commands: Dict[str, CommandConfig] = field(default_factory=dict)
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.commands, dict):
            raise ValueError("commands must be a table")

    def command_args(self, name: str, extra: Optional[List[str]] = None) -> List[str]:
        """Resolve the argument list for tool ``name``.

        Built-in defaults come first unless the tool's config sets
        ``replace_defaults``, then the configured args, then ``extra``.
        """
        args: List[str] = []
        command = self.commands.get(name)
        replace_defaults = command is not None and command.replace_defaults
        if not replace_defaults:
            args.extend(BUILTIN_COMMAND_ARGS.get(name, []))
        if command is not None:
            args.extend(command.args)
        args.extend(extra or [])
        return args

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from a parsed TOML document."""
        commands_table = config_dict.get("commands", {})
        retry_table = config_dict.get("retry", {})
        if not isinstance(commands_table, dict):
            raise ValueError("[commands] must be a table")
        if not isinstance(retry_table, dict):
            raise ValueError("[retry] must be a table")

        commands = {}
        for name, entry in commands_table.items():
            if not isinstance(entry, dict):
                raise ValueError(f"[commands.{name}] must be a table")
            # Extract only known fields
            known = {k: v for k, v in entry.items() if k in ("args", "replace_defaults")}
            commands[name] = CommandConfig(**known)

        known_retry_fields = {
            "deadline_seconds",
            "initial_delay_ms",
            "max_delay_ms",
            "extra_lock_markers",
        }
        retry = RetryPolicy(**{k: v for k, v in retry_table.items() if k in known_retry_fields})
        return cls(commands=commands, retry=retry)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load the config file, returning defaults when it does not exist."""
        path = path or config_path()
        if not path.exists():
            logger.debug(f"No config file at {path}, using defaults")
            return cls()
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
            config = cls.from_dict(data)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"invalid config file {path}: {e}") from e
        except (ValueError, TypeError) as e:
            raise ConfigError(f"invalid config file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"failed to read config file {path}: {e}") from e
        logger.debug(f"Loaded config from {path}")
        return config

    @staticmethod
    def init_default(path: Optional[Path] = None) -> Path:
        """Write the default config file unless one already exists.

        Returns:
            Path of the config file
        """
        path = path or config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.exists():
                logger.info(f"Config already exists at {path}, leaving it untouched")
            else:
                path.write_text(DEFAULT_CONFIG_CONTENTS)
                logger.info(f"Wrote default config to {path}")
        except OSError as e:
            raise ConfigError(f"failed to write config file {path}: {e}") from e
        return path


def home_dir() -> Path:
    """Home directory, honouring HOME (and USERPROFILE on Windows)."""
    for var in ("HOME", "USERPROFILE"):
        value = os.environ.get(var)
        if value:
            return Path(value)
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigError("failed to determine home directory") from e


def config_path() -> Path:
    return home_dir() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def display_path(path: Path) -> str:
    """Render ``path`` with the home directory shortened to ``~``."""
    try:
        return str(Path("~") / path.relative_to(home_dir()))
    except (ValueError, ConfigError):
        return str(path)
