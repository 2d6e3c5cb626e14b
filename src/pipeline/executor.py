# src/pipeline/executor.py — v1
"""Run one named provisioning step and capture its outcome as data.

A step either succeeds with an output mapping, is skipped with a reason, or
fails with an error classification. Exceptions raised by the step's work never
escape; cancellation does.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from sitestack.core.errors import PreconditionUnmet, error_kind
from sitestack.core.models import StepResult, StepStatus
from sitestack.logging.context import set_step_context
from sitestack.pipeline.observer import (
    LoggingObserver,
    ProvisioningObserver,
    summarize_output,
)

logger = logging.getLogger(__name__)

StepWork = Callable[[], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class Precondition:
    """A guard evaluated before a step's work; false means skip."""

    check: Callable[[], bool]
    reason: str


class StepExecutor:
    """Execute steps one at a time, notifying an observer.

    Args:
        observer: Receives start/success/failure/skipped notifications.
            Defaults to a LoggingObserver.
    """

    def __init__(self, observer: ProvisioningObserver | None = None) -> None:
        self._observer = observer or LoggingObserver()

    async def run(
        self,
        name: str,
        work: StepWork,
        precondition: Precondition | None = None,
    ) -> StepResult:
        """Run ``work`` once, unless ``precondition`` is unmet.

        Returns:
            StepResult in one of the three terminal states.
        """
        if precondition is not None and not precondition.check():
            return self.skip(name, precondition.reason)

        set_step_context(name)
        self._observer.on_step_start(name)
        start_ns = time.monotonic_ns()
        try:
            output = await work()
        except PreconditionUnmet as exc:
            duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
            self._observer.on_step_skipped(name, str(exc))
            return StepResult(
                name=name,
                status=StepStatus.SKIPPED,
                reason=str(exc),
                output=exc.partial,
                duration_ms=duration_ms,
            )
        except Exception as exc:
            duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
            kind = error_kind(exc)
            if kind == "unexpected":
                logger.exception("Step '%s' raised an unexpected error", name)
            self._observer.on_step_failure(name, str(exc))
            return StepResult(
                name=name,
                status=StepStatus.FAILED,
                output=dict(getattr(exc, "partial", None) or {}),
                error=str(exc) or type(exc).__name__,
                error_kind=kind,
                duration_ms=duration_ms,
            )
        finally:
            set_step_context(None)

        duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000
        output = dict(output or {})
        self._observer.on_step_success(name, summarize_output(output))
        return StepResult(
            name=name,
            status=StepStatus.SUCCEEDED,
            output=output,
            duration_ms=duration_ms,
        )

    def skip(self, name: str, reason: str) -> StepResult:
        """Record a step as skipped without running anything."""
        self._observer.on_step_skipped(name, reason)
        return StepResult(name=name, status=StepStatus.SKIPPED, reason=reason)
