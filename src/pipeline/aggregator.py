# src/pipeline/aggregator.py — v1
"""Fold step outputs into the run's ResourceRecord.

Successful steps contribute their output; failed steps contribute whatever
partial output they carry (a role created before its policy attachment
failed is still a created role). Values are never cleared.
"""

from __future__ import annotations

import logging

from sitestack.core.models import (
    ProvisioningRequest,
    ResourceRecord,
    StepResult,
    StepStatus,
)

logger = logging.getLogger(__name__)

CERTIFICATE_WAIT_STEP = "certificate_wait"
UNKNOWN_CERTIFICATE_STATUS = "unknown"


class RecordAggregator:
    """Accumulate a ResourceRecord from step results."""

    def __init__(self, request: ProvisioningRequest) -> None:
        self._record = ResourceRecord(
            site_name=request.site_name,
            domain=request.domain,
            region=request.region,
            repository=request.repository,
        )

    def absorb(self, result: StepResult) -> list[str]:
        """Merge one step result into the record.

        Returns:
            Names of the record fields that changed.
        """
        changed: list[str] = []
        if result.status is not StepStatus.SKIPPED or result.output:
            changed = self._record.merge(result.output)

        if (
            result.name == CERTIFICATE_WAIT_STEP
            and result.status is StepStatus.SKIPPED
            and self._record.certificate_arn
            and not self._record.certificate_status
        ):
            changed += self._record.merge(
                {"certificate_status": UNKNOWN_CERTIFICATE_STATUS}
            )

        if changed:
            logger.debug("Record updated by '%s': %s", result.name, changed)
        return changed

    def snapshot(self) -> ResourceRecord:
        """Return an independent copy of the record as it stands."""
        return self._record.model_copy(deep=True)
