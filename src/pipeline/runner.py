# src/pipeline/runner.py — v1
"""Pipeline runner — execute the step DAG and decide skip, continue or abort.

Walks the ExecutionPlan in order, gating each step on its request
preconditions and hard dependencies before handing it to the StepExecutor.
Every result is stored in the ProvisioningState and passed to the result
sink (the record aggregator) as soon as it is produced.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from sitestack.core.models import RunStatus, StepResult, StepStatus
from sitestack.pipeline.dag_builder import ExecutionPlan, build_dag
from sitestack.pipeline.executor import Precondition, StepExecutor
from sitestack.pipeline.state import ProvisioningState
from sitestack.pipeline.steps import StepSpec

logger = logging.getLogger(__name__)

ResultSink = Callable[[StepResult], None]


@dataclass
class RunResult:
    """Result of a full pipeline run."""

    state: ProvisioningState
    status: RunStatus = RunStatus.COMPLETE
    aborted_by: str | None = None
    failed_steps: list[str] = field(default_factory=list)
    skipped_steps: list[str] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def results(self) -> list[StepResult]:
        return self.state.ordered_results


def _unmet(reason: str) -> Precondition:
    return Precondition(check=lambda: False, reason=reason)


class PipelineRunner:
    """Execute provisioning steps against a ProvisioningState.

    Args:
        steps: Step declarations, in declaration order.
        executor: Runs individual steps.
        on_result: Called with every StepResult as it is produced.
        plan: Precomputed plan (built from ``steps`` when omitted).
    """

    def __init__(
        self,
        steps: list[StepSpec],
        executor: StepExecutor | None = None,
        on_result: ResultSink | None = None,
        plan: ExecutionPlan | None = None,
    ) -> None:
        self._steps = {spec.name: spec for spec in steps}
        if len(self._steps) != len(steps):
            raise ValueError("step names must be unique")
        self._plan = plan or build_dag(
            {spec.name: spec.dependencies for spec in steps}
        )
        self._executor = executor or StepExecutor()
        self._on_result = on_result

    @property
    def plan(self) -> ExecutionPlan:
        return self._plan

    async def run(self, state: ProvisioningState) -> RunResult:
        """Execute all steps in plan order.

        Returns:
            RunResult with the final status. Step failures never raise.
        """
        start_ns = time.monotonic_ns()
        result = RunResult(state=state)

        for name in self._plan.flat_order:
            spec = self._steps[name]
            if result.aborted_by is not None:
                gate: Precondition | None = _unmet(
                    f"aborted: root step '{result.aborted_by}' failed"
                )
            else:
                gate = self._gate(spec, state)

            step_result = await self._executor.run(name, lambda: spec.work(state), gate)
            state.record_result(step_result)
            if self._on_result is not None:
                self._on_result(step_result)

            if step_result.status is StepStatus.FAILED:
                result.failed_steps.append(name)
                if spec.root and result.aborted_by is None:
                    logger.error(
                        "Root step '%s' failed, aborting remaining steps", name
                    )
                    result.aborted_by = name
            elif step_result.status is StepStatus.SKIPPED:
                result.skipped_steps.append(name)

        if result.aborted_by is not None:
            result.status = RunStatus.ABORTED
        elif result.failed_steps or result.skipped_steps:
            result.status = RunStatus.PARTIAL
        else:
            result.status = RunStatus.COMPLETE
        result.duration_ms = (time.monotonic_ns() - start_ns) // 1_000_000

        logger.info(
            "Pipeline %s: %d steps, %d failed, %d skipped, %dms",
            result.status.value,
            self._plan.total_steps,
            len(result.failed_steps),
            len(result.skipped_steps),
            result.duration_ms,
        )
        return result

    def _gate(self, spec: StepSpec, state: ProvisioningState) -> Precondition | None:
        """First unmet request precondition, else first failed hard dependency."""
        for precondition in spec.preconditions:
            if not precondition.check():
                return precondition
        for dep in spec.hard_deps:
            if not state.succeeded(dep):
                return _unmet(f"hard dependency '{dep}' did not succeed")
        return None
