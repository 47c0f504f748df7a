"""
Order history view state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kungfu import Result, Ok, Error

from shoply._errors import ShopError
from shoply.auth import CurrentUser
from shoply.checkout import CheckoutService
from shoply.domain import Order

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OrderHistoryState:
    orders: tuple[Order, ...] = ()
    loading: bool = False
    error: ShopError | None = None


class OrderHistory:
    def __init__(self, user: CurrentUser, checkout: CheckoutService) -> None:
        self._user = user
        self._checkout = checkout
        self._state = OrderHistoryState()

    @property
    def state(self) -> OrderHistoryState:
        return self._state

    async def load(self) -> Result[list[Order], ShopError]:
        """Flush pending mirror writes, then list the owner's orders."""
        self._state = OrderHistoryState(orders=self._state.orders, loading=True)

        if self._checkout.pending_mirrors:
            match await self._checkout.retry_pending_mirrors():
                case Error(e):
                    logger.warning("Pending mirror retry failed: %s", e)
                case Ok(_):
                    pass

        result = await self._checkout.get_orders(self._user.current_user())
        match result:
            case Ok(orders):
                self._state = OrderHistoryState(orders=tuple(orders))
            case Error(e):
                self._state = OrderHistoryState(error=e)
        return result


__all__ = ("OrderHistoryState", "OrderHistory")
