# src/pipeline/dag_builder.py — v1
"""DAG builder — order provisioning steps from their dependency declarations.

Produces a topologically sorted execution plan. Detects cycles and validates
that all dependencies are declared.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


class DAGError(Exception):
    """Raised when DAG construction fails (cycle, missing dep)."""


@dataclass
class ExecutionPlan:
    """Ordered execution plan for pipeline steps.

    stages is a list of "levels": steps within the same level have no mutual
    dependencies. order is the sequence the runner follows.
    """

    stages: list[list[str]] = field(default_factory=list)
    order: list[str] = field(default_factory=list)
    total_steps: int = 0

    @property
    def flat_order(self) -> list[str]:
        """Return the sequential ordering (ties broken by declaration order)."""
        return list(self.order)


def build_dag(dependency_map: dict[str, list[str]]) -> ExecutionPlan:
    """Build an execution DAG from step dependency declarations.

    Uses Kahn's algorithm. Among the steps whose dependencies are resolved,
    the one declared first always goes next, so a declaration order that is
    already topological is preserved unchanged.

    Args:
        dependency_map: step_name -> list of dependency step names, in
            declaration order.

    Returns:
        ExecutionPlan with levels and sequential order.

    Raises:
        DAGError: If a cycle is detected or a dependency is missing.
    """
    if not dependency_map:
        return ExecutionPlan()

    position = {name: i for i, name in enumerate(dependency_map)}
    for step, deps in dependency_map.items():
        for dep in deps:
            if dep not in position:
                raise DAGError(
                    f"Step '{step}' depends on '{dep}' which is not declared"
                )
            if dep == step:
                raise DAGError(f"Step '{step}' depends on itself")

    in_degree: dict[str, int] = {s: 0 for s in dependency_map}
    dependents: dict[str, list[str]] = {s: [] for s in dependency_map}
    for step, deps in dependency_map.items():
        for dep in set(deps):
            dependents[dep].append(step)
            in_degree[step] += 1

    # Levels
    stages: list[list[str]] = []
    remaining = dict(in_degree)
    level = [s for s, d in remaining.items() if d == 0]
    while level:
        stages.append(sorted(level, key=position.__getitem__))
        next_level: list[str] = []
        for step in level:
            for dependent in dependents[step]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    next_level.append(dependent)
        level = next_level

    # Sequential order, earliest declaration first
    ready = [(position[s], s) for s, d in in_degree.items() if d == 0]
    heapq.heapify(ready)
    order: list[str] = []
    while ready:
        _, step = heapq.heappop(ready)
        order.append(step)
        for dependent in dependents[step]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, (position[dependent], dependent))

    if len(order) != len(dependency_map):
        cyclic = [s for s in dependency_map if in_degree[s] > 0]
        raise DAGError(f"Cycle detected involving steps: {cyclic}")

    plan = ExecutionPlan(stages=stages, order=order, total_steps=len(order))
    logger.debug(
        "DAG built: %d steps in %d stages → %s",
        plan.total_steps,
        len(plan.stages),
        plan.flat_order,
    )
    return plan
