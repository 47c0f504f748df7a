"""
Mirror-failure policies.

What place_order reports when the remote store accepted the order but
the local mirror write failed.

Namespace: checkout.policy.*

    CheckoutService(remote, mirror, policy=policy.fail_loud())
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconcilePolicy:
    """
    Report success; keep the order pending and retry the mirror later.

    The remote write is the commit point, so the order exists.
    """

    pass


def reconcile() -> ReconcilePolicy:
    return ReconcilePolicy()


@dataclass(frozen=True, slots=True)
class FailLoudPolicy:
    """Report MIRROR_WRITE_FAILURE, carrying the committed order."""

    pass


def fail_loud() -> FailLoudPolicy:
    return FailLoudPolicy()


type MirrorPolicy = ReconcilePolicy | FailLoudPolicy


def from_name(name: str) -> MirrorPolicy:
    match name:
        case "reconcile":
            return reconcile()
        case "fail_loud":
            return fail_loud()
        case _:
            raise ValueError(f"Unknown mirror failure policy: {name!r}")


class policy:
    """Mirror-failure policies."""

    reconcile = staticmethod(reconcile)
    fail_loud = staticmethod(fail_loud)
    from_name = staticmethod(from_name)


__all__ = (
    "ReconcilePolicy",
    "FailLoudPolicy",
    "MirrorPolicy",
    "reconcile",
    "fail_loud",
    "from_name",
    "policy",
)
