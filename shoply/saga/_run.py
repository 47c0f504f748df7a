"""
Saga execution with rollback up to the pivot.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from kungfu import Result, Ok, Error

from shoply.saga._types import CompensatorWithValue, SagaError, SagaResult, SagaStep

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Recorded Compensator
# ═══════════════════════════════════════════════════════════════════════════════

type RecordedCompensator = tuple[str, Any, CompensatorWithValue[Any]]

# ═══════════════════════════════════════════════════════════════════════════════
# run_compensators() — Rollback
# ═══════════════════════════════════════════════════════════════════════════════


async def run_compensators(
    compensators: list[RecordedCompensator],
) -> tuple[int, int]:
    """Run compensators in reverse. Returns (run, failed)."""
    comp_run = 0
    comp_failed = 0

    for name, value, comp in reversed(compensators):
        try:
            await comp(value)
            comp_run += 1
        except Exception:
            logger.exception("Compensator for step %r failed", name)
            comp_failed += 1

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Execute Steps In Order
# ═══════════════════════════════════════════════════════════════════════════════


async def run[E](
    steps: Sequence[SagaStep[Any, E]],
) -> Result[SagaResult, SagaError[E]]:
    """
    Execute saga steps in order.

    On success: returns SagaResult with every step's value by name.
    On failure before a pivot: runs recorded compensators in reverse.
    On failure after a pivot: nothing is compensated, error is committed.

    Example:
        result = await S.run(steps)

        match result:
            case Ok(r):
                print(r.values["remote"])
            case Error(e) if e.committed:
                schedule_retry(e.step_failed)
            case Error(e):
                print(f"Rolled back after {e.step_failed}")
    """
    compensators: list[RecordedCompensator] = []
    values: dict[str, Any] = {}
    committed = False

    for index, saga_step in enumerate(steps):
        result = await saga_step.action

        match result:
            case Ok(value):
                values[saga_step.name] = value
                if saga_step.pivot:
                    # past the commit point nothing is undone
                    committed = True
                    compensators.clear()
                elif saga_step.compensate is not None and not committed:
                    compensators.append((saga_step.name, value, saga_step.compensate))
                logger.debug("Saga step %r succeeded", saga_step.name)

            case Error(error):
                logger.debug("Saga step %r failed: %s", saga_step.name, error)
                comp_run, comp_failed = await run_compensators(compensators)
                return Error(SagaError(
                    error=error,
                    step_failed=saga_step.name,
                    index=index,
                    committed=committed,
                    compensators_run=comp_run,
                    compensators_failed=comp_failed,
                    rollback_complete=comp_failed == 0,
                ))

    return Ok(SagaResult(
        values=values,
        steps_executed=len(steps),
        compensators_recorded=len(compensators),
    ))


__all__ = ("run", "run_compensators")
