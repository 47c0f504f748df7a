"""
In-memory stores.

Note: single-process only. No durability, data is lost on restart.
Used by tests and by open_shop() when no remote store is configured.
"""

from __future__ import annotations

import asyncio

from kungfu import Result, Ok

from shoply._types import OrderId, OwnerId, ProductId
from shoply.domain import CartLine, Order
from shoply.store._types import StoreError


class MemoryCartStore:
    def __init__(self) -> None:
        # dict preserves insertion order, which select_all relies on
        self._lines: dict[tuple[OwnerId, ProductId], CartLine] = {}
        self._lock = asyncio.Lock()

    async def insert_if_absent(self, line: CartLine) -> Result[bool, StoreError]:
        async with self._lock:
            if line.key in self._lines:
                return Ok(False)
            self._lines[line.key] = line
            return Ok(True)

    async def increment_quantity(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[bool, StoreError]:
        async with self._lock:
            line = self._lines.get((owner_id, product_id))
            if line is None:
                return Ok(False)
            self._lines[line.key] = line.with_quantity(line.quantity + 1)
            return Ok(True)

    async def decrement_quantity(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[int | None, StoreError]:
        async with self._lock:
            line = self._lines.get((owner_id, product_id))
            if line is None:
                return Ok(None)
            remaining = max(line.quantity - 1, 0)
            if remaining == 0:
                del self._lines[line.key]
            else:
                self._lines[line.key] = line.with_quantity(remaining)
            return Ok(remaining)

    async def delete_line(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[bool, StoreError]:
        async with self._lock:
            return Ok(self._lines.pop((owner_id, product_id), None) is not None)

    async def select_all(self, owner_id: OwnerId) -> Result[list[CartLine], StoreError]:
        async with self._lock:
            return Ok([
                line for line in self._lines.values()
                if line.owner_id == owner_id and line.quantity > 0
            ])

    async def delete_all(self, owner_id: OwnerId) -> Result[int, StoreError]:
        async with self._lock:
            keys = [key for key in self._lines if key[0] == owner_id]
            for key in keys:
                del self._lines[key]
            return Ok(len(keys))


class MemoryOrderMirror:
    def __init__(self) -> None:
        self._orders: dict[OrderId, Order] = {}
        self._lock = asyncio.Lock()

    async def insert(self, order: Order) -> Result[None, StoreError]:
        async with self._lock:
            self._orders[order.id] = order
            return Ok(None)

    async def select_all(self) -> Result[list[Order], StoreError]:
        async with self._lock:
            return Ok(list(self._orders.values()))


class MemoryRemoteOrderStore:
    def __init__(self) -> None:
        self.documents: dict[OrderId, Order] = {}
        self._lock = asyncio.Lock()

    async def put(self, order_id: OrderId, order: Order) -> Result[None, StoreError]:
        async with self._lock:
            self.documents[order_id] = order
            return Ok(None)


__all__ = ("MemoryCartStore", "MemoryOrderMirror", "MemoryRemoteOrderStore")
