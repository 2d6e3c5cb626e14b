# src/pipeline/waiter.py — v1
"""Poll a remote condition until it settles or an attempt budget runs out.

Used wherever a remote resource becomes consistent some time after the call
that created it: certificate validation records appearing, certificate
issuance. The check callable classifies each observation; the waiter owns the
pacing, the budget and the handling of failing checks.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Union

from sitestack.core.errors import TerminalRemoteState, TimeoutExceeded

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHECK_ERRORS = 3


@dataclass(frozen=True)
class Ready:
    """The condition holds; ``value`` is what the caller waited for."""

    value: Any = None


@dataclass(frozen=True)
class Pending:
    """Not there yet."""

    detail: str = ""


@dataclass(frozen=True)
class TerminalFailure:
    """The remote side reported a state it will never leave."""

    reason: str


PollOutcome = Union[Ready, Pending, TerminalFailure]
CheckFn = Callable[[], Awaitable[PollOutcome]]
SleepFn = Callable[[float], Awaitable[Any]]


class WaitOutcome(str, Enum):
    READY = "ready"
    TERMINAL_FAILURE = "terminal_failure"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class WaitResult:
    """How a wait ended.

    Attributes:
        outcome: ready, terminal_failure or timeout.
        value: Ready value (only for ``ready``).
        reason: Failure reason, last pending detail or last check error.
        attempts: Number of checks performed.
        errors: Number of checks that raised.
    """

    outcome: WaitOutcome
    value: Any = None
    reason: str | None = None
    attempts: int = 0
    errors: int = 0

    @property
    def ready(self) -> bool:
        return self.outcome is WaitOutcome.READY

    def raise_for_outcome(self, label: str = "condition") -> Any:
        """Return the ready value, or raise for the other outcomes.

        Raises:
            TerminalRemoteState: The remote side reported a final failure.
            TimeoutExceeded: The attempt budget ran out.
        """
        if self.outcome is WaitOutcome.READY:
            return self.value
        if self.outcome is WaitOutcome.TERMINAL_FAILURE:
            raise TerminalRemoteState(f"{label} failed: {self.reason}")
        detail = f" (last: {self.reason})" if self.reason else ""
        raise TimeoutExceeded(
            f"{label} not reached after {self.attempts} checks{detail}"
        )


def attempts_for(max_wait_s: float, interval_s: float) -> int:
    """Number of checks that fit in ``max_wait_s`` at one per ``interval_s``.

    Always at least one.
    """
    if interval_s <= 0:
        raise ValueError("interval_s must be positive")
    return max(1, math.floor(max_wait_s / interval_s))


async def poll(
    check: CheckFn,
    interval_s: float,
    max_attempts: int,
    max_check_errors: int = DEFAULT_MAX_CHECK_ERRORS,
    sleep: SleepFn = asyncio.sleep,
    label: str = "",
) -> WaitResult:
    """Run ``check`` until it returns Ready or TerminalFailure.

    Checks never overlap. The waiter sleeps ``interval_s`` between two checks,
    never before the first one and never after the last one, so a timeout
    costs exactly ``max_attempts`` checks and ``max_attempts - 1`` sleeps.

    A check that raises counts as an attempt and is treated as pending. Once
    more than ``max_check_errors`` checks have raised, the wait gives up with
    a timeout carrying the last error.

    Args:
        check: Async callable classifying the current remote state.
        interval_s: Delay between checks in seconds.
        max_attempts: Maximum number of checks.
        max_check_errors: Tolerated number of failing checks.
        sleep: Awaitable sleep (injected by tests).
        label: Name used in log lines.

    Returns:
        WaitResult describing how the wait ended.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    label = label or getattr(check, "__name__", "condition")

    errors = 0
    last_reason: str | None = None

    for attempt in range(1, max_attempts + 1):
        try:
            outcome = await check()
        except Exception as exc:
            errors += 1
            last_reason = f"{type(exc).__name__}: {exc}"
            logger.warning(
                "Wait '%s': check %d/%d raised (%d/%d tolerated): %s",
                label, attempt, max_attempts, errors, max_check_errors, last_reason,
            )
            if errors > max_check_errors:
                return WaitResult(
                    outcome=WaitOutcome.TIMEOUT,
                    reason=last_reason,
                    attempts=attempt,
                    errors=errors,
                )
            outcome = Pending(last_reason)

        if isinstance(outcome, Ready):
            logger.debug("Wait '%s': ready after %d checks", label, attempt)
            return WaitResult(
                outcome=WaitOutcome.READY,
                value=outcome.value,
                attempts=attempt,
                errors=errors,
            )
        if isinstance(outcome, TerminalFailure):
            logger.debug(
                "Wait '%s': terminal failure after %d checks: %s",
                label, attempt, outcome.reason,
            )
            return WaitResult(
                outcome=WaitOutcome.TERMINAL_FAILURE,
                reason=outcome.reason,
                attempts=attempt,
                errors=errors,
            )

        last_reason = outcome.detail or last_reason
        if attempt < max_attempts:
            logger.debug(
                "Wait '%s': pending (%d/%d), next check in %.1fs",
                label, attempt, max_attempts, interval_s,
            )
            await sleep(interval_s)

    logger.debug("Wait '%s': timed out after %d checks", label, max_attempts)
    return WaitResult(
        outcome=WaitOutcome.TIMEOUT,
        reason=last_reason,
        attempts=max_attempts,
        errors=errors,
    )
