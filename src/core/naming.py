# src/core/naming.py — v1
"""Resource names derived from the site name.

Names are regenerated on every run: provisioning is not idempotent by name.
"""

from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceNames:
    """All remote resource names used by one provisioning run."""

    bucket: str
    function: str
    origin_access_control: str
    policy: str
    role: str
    caller_reference: str


def derive_names(site_name: str, now_ms: int | None = None) -> ResourceNames:
    """Derive per-run resource names.

    The bucket gets the last six digits of the epoch milliseconds as suffix so
    that two runs for different sites never collide.

    Args:
        site_name: Validated site identifier.
        now_ms: Epoch milliseconds (defaults to the current time).
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    stamp = str(now_ms)
    return ResourceNames(
        bucket=f"{site_name}-{stamp[-6:]}",
        function=f"{site_name}-redirect-function",
        origin_access_control=f"{site_name}-oac",
        policy=f"{site_name}-deploy-policy",
        role=f"{site_name}-github-actions-role",
        caller_reference=f"{site_name}-{stamp}",
    )
