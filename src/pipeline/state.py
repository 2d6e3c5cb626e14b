# src/pipeline/state.py — v1
"""Pipeline state flowing through all provisioning steps.

Holds the request, the per-run resource names and every step result produced
so far. Steps read the outputs of their dependencies through output_of(),
which hands out copies so that no step can alter another step's output.
"""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from sitestack.core.models import ProvisioningRequest, StepResult, StepStatus
from sitestack.core.naming import ResourceNames


class ProvisioningState(BaseModel):
    """State accumulating step results across one run."""

    model_config = {"arbitrary_types_allowed": True}

    # === IDENTITY ===
    run_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    request: ProvisioningRequest
    names: ResourceNames
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # === RESULTS ===
    results: dict[str, StepResult] = Field(default_factory=dict)

    def record_result(self, result: StepResult) -> None:
        """Store a step result. Each step is recorded once."""
        if result.name in self.results:
            raise ValueError(f"Step '{result.name}' already has a result")
        self.results[result.name] = result

    def status_of(self, name: str) -> StepStatus | None:
        result = self.results.get(name)
        return result.status if result is not None else None

    def succeeded(self, name: str) -> bool:
        return self.status_of(name) is StepStatus.SUCCEEDED

    def output_of(self, name: str) -> dict[str, Any]:
        """Return a copy of a succeeded step's output, else an empty dict."""
        result = self.results.get(name)
        if result is None or result.status is not StepStatus.SUCCEEDED:
            return {}
        return copy.deepcopy(result.output)

    def value(self, name: str, key: str, default: Any = None) -> Any:
        """Shortcut for ``output_of(name).get(key, default)``."""
        return self.output_of(name).get(key, default)

    @property
    def ordered_results(self) -> list[StepResult]:
        return list(self.results.values())
