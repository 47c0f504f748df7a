"""
Checkout — order placement, the shipping form and mirror policies.

    from shoply.checkout import CheckoutService, CheckoutForm, policy

    checkout = CheckoutService(remote, mirror, policy=policy.reconcile())
    form = CheckoutForm()
    form.update_address("1 Main St")
    ...
    result = await checkout.place_order("user-1", form.draft(lines))
"""

from __future__ import annotations

from shoply.checkout._policy import (
    ReconcilePolicy,
    FailLoudPolicy,
    MirrorPolicy,
    policy,
)
from shoply.checkout._service import CheckoutService, validate_draft
from shoply.checkout._form import FormState, CheckoutForm, is_form_valid

__all__ = (
    "ReconcilePolicy",
    "FailLoudPolicy",
    "MirrorPolicy",
    "policy",
    "CheckoutService",
    "validate_draft",
    "FormState",
    "CheckoutForm",
    "is_form_valid",
)
