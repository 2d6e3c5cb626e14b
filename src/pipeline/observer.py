# src/pipeline/observer.py — v1
"""Step lifecycle notifications.

The executor reports every step transition to a ProvisioningObserver. The
default implementation writes them to the log; tests record them.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ProvisioningObserver(Protocol):
    """Receives step transitions from the executor.

    A step gated before it runs gets only ``on_step_skipped``. A step that
    starts gets ``on_step_start`` followed by exactly one of success, failure
    or skipped; the skipped case happens when the work itself finds its
    inputs unusable (PreconditionUnmet).
    """

    def on_step_start(self, name: str) -> None: ...

    def on_step_success(self, name: str, summary: str) -> None: ...

    def on_step_failure(self, name: str, reason: str) -> None: ...

    def on_step_skipped(self, name: str, reason: str) -> None: ...


def summarize_output(output: dict[str, Any], limit: int = 3) -> str:
    """One-line summary of a step output for progress messages."""
    items = [(k, v) for k, v in output.items() if v not in (None, "", [], {})]
    parts = []
    for key, value in items[:limit]:
        if isinstance(value, list):
            parts.append(f"{key}=[{len(value)}]")
        else:
            parts.append(f"{key}={value}")
    if len(items) > limit:
        parts.append(f"+{len(items) - limit} more")
    return ", ".join(parts)


class LoggingObserver:
    """Write step transitions to the ``sitestack`` log."""

    def on_step_start(self, name: str) -> None:
        logger.info("Step '%s' started", name)

    def on_step_success(self, name: str, summary: str) -> None:
        logger.info("Step '%s' succeeded%s", name, f": {summary}" if summary else "")

    def on_step_failure(self, name: str, reason: str) -> None:
        logger.error("Step '%s' failed: %s", name, reason)

    def on_step_skipped(self, name: str, reason: str) -> None:
        logger.warning("Step '%s' skipped: %s", name, reason)
