"""
Store protocols — typed, Result-based access contracts.

Adapters catch their own exceptions and return Error(StoreError(...)).
Services convert StoreError into the shop taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from kungfu import Result

from shoply._types import OrderId, OwnerId, ProductId
from shoply.domain import CartLine, Order


# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StoreError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Local Cart Store
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(Protocol):
    """
    Durable per-device table of cart lines keyed by (owner, product).

    Example — wiring a service:

        store = SQLAlchemyCartStore(session_factory)
        cart = CartService(store)
    """

    async def insert_if_absent(self, line: CartLine) -> Result[bool, StoreError]:
        """Insert-or-ignore. Ok(True) if inserted, Ok(False) if the key existed."""
        ...

    async def increment_quantity(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[bool, StoreError]:
        """Ok(True) if a line was bumped, Ok(False) if none exists."""
        ...

    async def decrement_quantity(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[int | None, StoreError]:
        """
        Decrement by one, clamped at zero.

        A line that reaches zero is deleted in the same write, so storage
        never keeps a zero-quantity row. Returns Ok(remaining quantity)
        or Ok(None) when the line is absent.
        """
        ...

    async def delete_line(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[bool, StoreError]:
        """Ok(True) if a line existed."""
        ...

    async def select_all(self, owner_id: OwnerId) -> Result[list[CartLine], StoreError]:
        """All lines with quantity > 0 for the owner, in insertion order."""
        ...

    async def delete_all(self, owner_id: OwnerId) -> Result[int, StoreError]:
        """Remove every line for the owner. Returns how many were removed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Order Stores
# ═══════════════════════════════════════════════════════════════════════════════


class OrderMirror(Protocol):
    """Local read-cache of orders the remote store has accepted."""

    async def insert(self, order: Order) -> Result[None, StoreError]: ...

    async def select_all(self) -> Result[list[Order], StoreError]: ...


class RemoteOrderStore(Protocol):
    """Authoritative order store. Keyed by id, last write wins."""

    async def put(self, order_id: OrderId, order: Order) -> Result[None, StoreError]: ...


__all__ = ("StoreError", "CartStore", "OrderMirror", "RemoteOrderStore")
