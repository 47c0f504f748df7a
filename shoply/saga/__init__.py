"""
Saga — multi-store writes with compensation up to a commit point.

    from shoply import saga as S

    result = await S.run([
        S.step("remote", put_remote, pivot=True),
        S.step("mirror", put_mirror),
    ])
"""

from __future__ import annotations

from shoply.saga._types import (
    CompensatorWithValue,
    SagaStep,
    SagaResult,
    SagaError,
)
from shoply.saga._step import step
from shoply.saga._run import run, run_compensators

__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "SagaResult",
    "SagaError",
    "step",
    "run",
    "run_compensators",
)
