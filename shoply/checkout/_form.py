"""
Checkout form state machine.

    INCOMPLETE ⇄ VALID → SUBMITTING → INCOMPLETE (reset) | VALID (end_submit)

Validity is re-evaluated on every field update. A postal code longer
than POSTAL_CODE_LENGTH is dropped at the input boundary, never truncated.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import Enum, auto

from shoply.domain import POSTAL_CODE_LENGTH, CartLine, OrderDraft, is_blank, utcnow

logger = logging.getLogger(__name__)


class FormState(Enum):
    INCOMPLETE = auto()
    VALID = auto()
    SUBMITTING = auto()


def is_form_valid(address: str, city: str, postal_code: str) -> bool:
    return (
        not is_blank(address)
        and not is_blank(city)
        and not is_blank(postal_code)
        and len(postal_code) == POSTAL_CODE_LENGTH
    )


class CheckoutForm:
    def __init__(self) -> None:
        self._address = ""
        self._city = ""
        self._postal_code = ""
        self._submitting = False

    @property
    def address(self) -> str:
        return self._address

    @property
    def city(self) -> str:
        return self._city

    @property
    def postal_code(self) -> str:
        return self._postal_code

    @property
    def is_valid(self) -> bool:
        return is_form_valid(self._address, self._city, self._postal_code)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def state(self) -> FormState:
        if self._submitting:
            return FormState.SUBMITTING
        return FormState.VALID if self.is_valid else FormState.INCOMPLETE

    def update_address(self, value: str) -> None:
        self._address = value

    def update_city(self, value: str) -> None:
        self._city = value

    def update_postal_code(self, value: str) -> bool:
        """Returns False and keeps the old value when input is too long."""
        if len(value) > POSTAL_CODE_LENGTH:
            logger.warning(
                "Postal code input of length %d dropped (max %d)", len(value), POSTAL_CODE_LENGTH
            )
            return False
        self._postal_code = value
        return True

    def begin_submit(self) -> bool:
        """Enter SUBMITTING. Only allowed from VALID."""
        if self.state is not FormState.VALID:
            return False
        self._submitting = True
        return True

    def end_submit(self) -> None:
        self._submitting = False

    def reset(self) -> None:
        self._address = ""
        self._city = ""
        self._postal_code = ""
        self._submitting = False

    def draft(
        self,
        lines: Iterable[CartLine],
        now: Callable[[], datetime] = utcnow,
    ) -> OrderDraft:
        return OrderDraft.from_cart(
            lines,
            address=self._address,
            city=self._city,
            postal_code=self._postal_code,
            now=now,
        )


__all__ = ("FormState", "CheckoutForm", "is_form_valid")
