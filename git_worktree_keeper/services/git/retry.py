"""Retry git mutations that fail on transient index/lock contention.

Git briefly holds ``index.lock`` and friends while other git processes
(another worktree command, a background fetch, an editor integration) run.
Failures caused by that contention are retried with bounded exponential
backoff; anything else is returned to the caller immediately.
"""

import time
from typing import Callable, Iterable, Optional, Sequence

from git_worktree_keeper.config import RetryPolicy
from git_worktree_keeper.constants import LOCK_ERROR_COMBINED_MARKERS, LOCK_ERROR_MARKERS
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.git.gateway import GitResult

logger = get_logger(__name__)


def is_git_lock_error(
    stderr: str,
    markers: Iterable[str] = LOCK_ERROR_MARKERS,
    combined_markers: Iterable[Sequence[str]] = LOCK_ERROR_COMBINED_MARKERS,
) -> bool:
    """Check whether git's diagnostic text describes lock contention.

    Args:
        stderr: Captured stderr from git
        markers: Lowercase substrings, any one of which is enough
        combined_markers: Groups of lowercase substrings that must all be present

    Returns:
        True if the failure looks transient
    """
    text = stderr.lower()
    if any(marker in text for marker in markers):
        return True
    return any(all(part in text for part in group) for group in combined_markers)


def run_with_lock_retry(
    operation: Callable[[], GitResult],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> GitResult:
    """Run ``operation`` until it succeeds, fails for a non-lock reason, or the deadline passes.

    Args:
        operation: Callable running one git command
        policy: Backoff settings and lock markers (defaults if omitted)
        sleep: Sleep function, injectable for tests
        clock: Monotonic clock, injectable for tests

    Returns:
        The last GitResult; callers check ``ok`` and raise with its stderr
    """
    policy = policy or RetryPolicy()
    start = clock()
    delay = policy.initial_delay_ms / 1000
    max_delay = policy.max_delay_ms / 1000
    attempt = 1

    while True:
        result = operation()
        if result.ok:
            if attempt > 1:
                logger.debug(f"git succeeded after {attempt} attempts")
            return result

        transient = is_git_lock_error(
            result.stderr, policy.lock_markers, policy.combined_lock_markers
        )
        elapsed = clock() - start
        if not transient or elapsed >= policy.deadline_seconds:
            if transient:
                logger.warning(
                    f"git lock contention persisted for {elapsed:.2f}s, giving up after {attempt} attempts"
                )
            return result

        logger.debug(
            f"git lock contention on attempt {attempt}, retrying in {delay * 1000:.0f}ms"
        )
        sleep(delay)
        delay = min(delay * 2, max_delay)
        attempt += 1
