# src/pipeline/orchestrator.py — v1
"""Orchestrator — wire a request to clients, observer and store, run it.

Whatever happens during the run (step failures, a root abort, cancellation),
the record accumulated so far is persisted exactly once before run() returns
or raises.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid

from sitestack.clients.base import ClientSet
from sitestack.config.settings import Settings
from sitestack.core.models import ProvisioningReport, ProvisioningRequest
from sitestack.core.naming import derive_names
from sitestack.logging.context import clear_context, set_run_context
from sitestack.pipeline.aggregator import RecordAggregator
from sitestack.pipeline.executor import StepExecutor
from sitestack.pipeline.observer import ProvisioningObserver
from sitestack.pipeline.runner import PipelineRunner
from sitestack.pipeline.state import ProvisioningState
from sitestack.pipeline.steps import build_site_steps
from sitestack.pipeline.waiter import SleepFn
from sitestack.storage.base_site_store import BaseSiteStore

logger = logging.getLogger(__name__)


class ProvisioningOrchestrator:
    """Provision one static site per run() call.

    Args:
        clients: Cloud service clients.
        settings: Poll budgets, OIDC parameters, price class.
        store: Receives the final ResourceRecord (optional).
        observer: Step lifecycle sink (LoggingObserver by default).
        sleep: Awaitable sleep used by every wait (injected by tests).
    """

    def __init__(
        self,
        clients: ClientSet,
        settings: Settings,
        store: BaseSiteStore | None = None,
        observer: ProvisioningObserver | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._clients = clients
        self._settings = settings
        self._store = store
        self._observer = observer
        self._sleep = sleep

    async def run(
        self,
        request: ProvisioningRequest,
        run_id: str | None = None,
        now_ms: int | None = None,
    ) -> ProvisioningReport:
        """Provision all resources for ``request``.

        Args:
            request: What to provision.
            run_id: Identifier for logs (generated when omitted).
            now_ms: Epoch milliseconds for name derivation (tests).

        Returns:
            ProvisioningReport with every step result and the record.
        """
        run_id = run_id or uuid.uuid4().hex[:12]
        start_ns = time.monotonic_ns()
        set_run_context(request.site_name, run_id)

        names = derive_names(request.site_name, now_ms)
        state = ProvisioningState(run_id=run_id, request=request, names=names)
        aggregator = RecordAggregator(request)
        runner = PipelineRunner(
            build_site_steps(request, self._clients, self._settings, self._sleep),
            executor=StepExecutor(self._observer),
            on_result=aggregator.absorb,
        )

        logger.info(
            "Provisioning %s (domain=%s, region=%s, repository=%s)",
            request.site_name,
            request.domain or "-",
            request.region,
            request.repository or "-",
        )
        try:
            run_result = await runner.run(state)
        finally:
            record = aggregator.snapshot()
            try:
                if self._store is not None:
                    await self._store.save(record)
            finally:
                clear_context()

        report = ProvisioningReport(
            request=request,
            run_id=run_id,
            status=run_result.status,
            steps=run_result.results,
            record=record,
            duration_ms=(time.monotonic_ns() - start_ns) // 1_000_000,
        )
        logger.info(
            "Provisioning %s finished: %s (%d failed, %d skipped)",
            request.site_name,
            report.status.value,
            len(report.failed_steps),
            len(report.skipped_steps),
        )
        return report
