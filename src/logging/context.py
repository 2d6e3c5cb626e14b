# src/logging/context.py — v1
"""Contextual logging support: attach site, run_id and step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per provisioning run.
_site: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "site", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    site: str | None = None
    run_id: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        site=_site.get(),
        run_id=_run_id.get(),
        step=_step.get(),
    )


def set_run_context(site: str, run_id: str) -> None:
    """Set run-level context (called once per provisioning run)."""
    _site.set(site)
    _run_id.set(run_id)


def set_step_context(step: str | None) -> None:
    """Set step-level context (called per step execution)."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _site.set(None)
    _run_id.set(None)
    _step.set(None)
