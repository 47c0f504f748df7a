"""
Cart — per-owner cart mutations over a CartStore.

    from shoply.cart import CartService

    cart = CartService(MemoryCartStore())
    await cart.add_to_cart("user-1", product)
"""

from __future__ import annotations

from shoply.cart._service import CartService, resolve_owner

__all__ = ("CartService", "resolve_owner")
