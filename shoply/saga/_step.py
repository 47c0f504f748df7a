"""
Saga step creation.
"""

from __future__ import annotations

from kungfu import LazyCoroResult

from shoply.saga._types import CompensatorWithValue, SagaStep


def step[T, E](
    name: str,
    action: LazyCoroResult[T, E],
    compensate: CompensatorWithValue[T] | None = None,
    *,
    pivot: bool = False,
) -> SagaStep[T, E]:
    """
    Create a saga step.

    Example:
        from shoply import saga as S

        steps = [
            S.step("remote", LazyCoroResult(lambda: remote.put(order.id, order)), pivot=True),
            S.step("mirror", LazyCoroResult(lambda: mirror.insert(order))),
        ]
        result = await S.run(steps)
    """
    return SagaStep(name=name, action=action, compensate=compensate, pivot=pivot)


__all__ = ("step",)
