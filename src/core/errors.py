# src/core/errors.py — v1
"""Provisioning error taxonomy.

Step-level errors are captured as data by the step executor; these classes
exist so that flows and adapters can say *why* a step did not complete.
"""

from __future__ import annotations

from typing import Any


class ProvisioningError(Exception):
    """Base class for all provisioning failures.

    Args:
        message: Human-readable description.
        partial: Output produced before the failure (e.g. the ARN of a role
            that was created before attaching its policy failed).
    """

    code: str = "provisioning_error"

    def __init__(self, message: str, partial: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.partial = dict(partial or {})


class RemoteCallError(ProvisioningError):
    """A cloud API call failed (transport, auth, 4xx/5xx)."""

    code = "remote_call"

    def __init__(
        self,
        operation: str,
        error_code: str,
        message: str,
        partial: dict[str, Any] | None = None,
    ) -> None:
        self.operation = operation
        self.error_code = error_code
        super().__init__(f"{operation} failed ({error_code}): {message}", partial)


class ResourceAlreadyExists(RemoteCallError):
    """The remote API refused to create a resource because it already exists."""

    code = "already_exists"


class PreconditionUnmet(ProvisioningError):
    """A step's precondition is false. Produces a skip, not a failure."""

    code = "precondition_unmet"


class TerminalRemoteState(ProvisioningError):
    """A remote resource explicitly reported failure (e.g. certificate FAILED)."""

    code = "terminal_state"


class TimeoutExceeded(ProvisioningError):
    """A wait exhausted its attempt budget without a final answer."""

    code = "timeout"


def error_kind(exc: BaseException) -> str:
    """Return the taxonomy code for an exception (``unexpected`` if foreign)."""
    if isinstance(exc, ProvisioningError):
        return exc.code
    return "unexpected"
