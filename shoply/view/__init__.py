"""
View — read models consumed by the UI.

    from shoply.view import CartCheckout

    view = CartCheckout(session, cart, checkout)
    await view.add_to_cart(product)
    view.state.total
"""

from __future__ import annotations

from shoply.view._cart_checkout import CartCheckoutState, CartCheckout
from shoply.view._history import OrderHistoryState, OrderHistory

__all__ = (
    "CartCheckoutState",
    "CartCheckout",
    "OrderHistoryState",
    "OrderHistory",
)
