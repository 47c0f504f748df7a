"""
Domain — products, cart lines, order drafts and placed orders.

    from shoply.domain import CartLine, Order, OrderDraft, cart_total

    draft = OrderDraft.from_cart(lines, address="1 Main St", city="Oslo", postal_code="123456")
    order = Order.place("user-1", draft)
    assert order.total == cart_total(lines)
"""

from __future__ import annotations

from shoply.domain._models import (
    POSTAL_CODE_LENGTH,
    is_blank,
    utcnow,
    Product,
    Direction,
    CartLine,
    cart_total,
    OrderDraft,
    Order,
)

__all__ = (
    "POSTAL_CODE_LENGTH",
    "is_blank",
    "utcnow",
    "Product",
    "Direction",
    "CartLine",
    "cart_total",
    "OrderDraft",
    "Order",
)
