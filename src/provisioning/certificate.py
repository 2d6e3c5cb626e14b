# src/provisioning/certificate.py — v1
"""TLS certificate flow: request, obtain validation records, wait for issuance.

Inserting the validation records into DNS is a separate pipeline step (see
provisioning/dns.py) between the second and third operation here.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from sitestack.clients.base import BaseCertificateClient
from sitestack.core.errors import TerminalRemoteState, TimeoutExceeded
from sitestack.pipeline.waiter import (
    DEFAULT_MAX_CHECK_ERRORS,
    Pending,
    PollOutcome,
    Ready,
    SleepFn,
    TerminalFailure,
    WaitOutcome,
    poll,
)

logger = logging.getLogger(__name__)

ISSUED = "ISSUED"
FAILED = "FAILED"
PROGRESS_EVERY = 4


async def request_certificate(
    client: BaseCertificateClient, domain: str
) -> dict[str, Any]:
    """Request a DNS-validated certificate for ``domain``."""
    arn = await client.request_certificate(domain)
    logger.info("Certificate requested for %s: %s", domain, arn)
    return {"certificate_arn": arn}


async def fetch_validation_records(
    client: BaseCertificateClient,
    arn: str,
    interval_s: float = 5.0,
    max_attempts: int = 5,
    max_check_errors: int = DEFAULT_MAX_CHECK_ERRORS,
    sleep: SleepFn = asyncio.sleep,
) -> dict[str, Any]:
    """Poll the certificate until its validation records are published.

    Raises:
        TimeoutExceeded: The records did not appear within the budget.
    """

    async def records_available() -> PollOutcome:
        description = await client.describe_certificate(arn)
        if description.validation_records:
            return Ready(description.validation_records)
        return Pending(f"status={description.status}, no validation records yet")

    result = await poll(
        records_available,
        interval_s=interval_s,
        max_attempts=max_attempts,
        max_check_errors=max_check_errors,
        sleep=sleep,
        label="certificate validation records",
    )
    if not result.ready:
        logger.warning(
            "Validation records for %s are not available yet; add them to DNS "
            "manually once the certificate exposes them",
            arn,
        )
    records = result.raise_for_outcome("certificate validation records")
    return {"validation_records": [r.model_dump() for r in records]}


async def wait_for_issuance(
    client: BaseCertificateClient,
    arn: str,
    interval_s: float = 30.0,
    max_attempts: int = 30,
    max_check_errors: int = DEFAULT_MAX_CHECK_ERRORS,
    sleep: SleepFn = asyncio.sleep,
) -> dict[str, Any]:
    """Wait until the certificate is ISSUED.

    Raises:
        TerminalRemoteState: The certificate authority rejected the request.
        TimeoutExceeded: Still pending after ``max_attempts`` checks. The last
            seen status is carried as partial output.
    """
    checks = 0
    last_status: str | None = None

    async def issued() -> PollOutcome:
        nonlocal checks, last_status
        checks += 1
        description = await client.describe_certificate(arn)
        last_status = description.status
        if description.status == ISSUED:
            return Ready(description.status)
        if description.status == FAILED:
            return TerminalFailure(description.failure_reason or "certificate FAILED")
        if checks % PROGRESS_EVERY == 0:
            logger.info(
                "Still waiting for certificate issuance (%d/%d checks, status=%s)",
                checks, max_attempts, description.status,
            )
        return Pending(f"status={description.status}")

    logger.info(
        "Waiting for certificate issuance (up to %d checks every %.0fs)",
        max_attempts, interval_s,
    )
    result = await poll(
        issued,
        interval_s=interval_s,
        max_attempts=max_attempts,
        max_check_errors=max_check_errors,
        sleep=sleep,
        label="certificate issuance",
    )

    if result.outcome is WaitOutcome.TERMINAL_FAILURE:
        raise TerminalRemoteState(
            f"certificate {arn} failed validation: {result.reason}",
            partial={"certificate_status": FAILED},
        )
    if result.outcome is WaitOutcome.TIMEOUT:
        raise TimeoutExceeded(
            f"certificate {arn} not issued after {result.attempts} checks "
            f"(last: {result.reason})",
            partial={"certificate_status": last_status} if last_status else None,
        )

    logger.info("Certificate %s issued", arn)
    return {"certificate_arn": arn, "certificate_status": ISSUED}
