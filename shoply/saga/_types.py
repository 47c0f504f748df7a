"""
Saga types — core data structures.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — Undo Action
# ═══════════════════════════════════════════════════════════════════════════════

type CompensatorWithValue[T] = Callable[[T], Awaitable[None]]
"""Compensation function that receives the action result and undoes it."""

# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep — Single Named Step
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    A single saga step: action + compensator.

    When action succeeds, compensator is recorded.
    If a later step fails, compensators run in reverse.

    pivot: the step is the commit point. Once it succeeds nothing before
    it is compensated; failures after it are reported as committed and
    left to forward recovery.
    """

    name: str
    action: LazyCoroResult[T, E]
    compensate: CompensatorWithValue[T] | None = None
    pivot: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult:
    """Successful saga result with metadata. values is keyed by step name."""

    values: dict[str, Any] = field(default_factory=dict)
    steps_executed: int = 0
    compensators_recorded: int = 0


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """
    Saga error with rollback status.

    committed: a pivot step had already succeeded when this step failed.
    """

    error: E
    step_failed: str
    index: int
    committed: bool
    compensators_run: int
    compensators_failed: int
    rollback_complete: bool


__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "SagaResult",
    "SagaError",
)
