"""Failing collaborators and shared constants."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from kungfu import Error

from shoply.store import MemoryCartStore, MemoryOrderMirror, MemoryRemoteOrderStore, StoreError

OWNER = "user-1"
OTHER = "user-2"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FailingRemote:
    """Remote order store that rejects every write."""

    def __init__(self) -> None:
        self.calls = 0

    async def put(self, order_id, order):
        self.calls += 1
        return Error(StoreError("remote unavailable"))


class RaisingRemote:
    """Remote order store whose client blows up instead of returning an Error."""

    async def put(self, order_id, order):
        raise ConnectionError("socket closed")


class FailingMirror(MemoryOrderMirror):
    """Mirror whose inserts fail until `healthy` is flipped."""

    def __init__(self) -> None:
        super().__init__()
        self.healthy = False
        self.attempts = 0

    async def insert(self, order):
        self.attempts += 1
        if not self.healthy:
            return Error(StoreError("disk full"))
        return await super().insert(order)


class BrokenCartStore(MemoryCartStore):
    """Cart store whose reads and clears fail."""

    async def select_all(self, owner_id):
        return Error(StoreError("table locked"))

    async def delete_all(self, owner_id):
        return Error(StoreError("table locked"))


class UnclearableCartStore(MemoryCartStore):
    """Cart store that reads fine but cannot be cleared."""

    async def delete_all(self, owner_id):
        return Error(StoreError("table locked"))


class UndeletableCartStore(MemoryCartStore):
    """Cart store whose single-line delete always fails."""

    async def delete_line(self, owner_id, product_id):
        return Error(StoreError("table locked"))


class RaisingCartStore(MemoryCartStore):
    """Cart store whose driver raises instead of returning an Error."""

    async def select_all(self, owner_id):
        raise OSError("disk I/O error")

    async def insert_if_absent(self, line):
        raise OSError("disk I/O error")

    async def decrement_quantity(self, owner_id, product_id):
        raise OSError("disk I/O error")


class VanishingLineCartStore(MemoryCartStore):
    """Cart store where the line is removed right before the next increment lands."""

    def __init__(self) -> None:
        super().__init__()
        self.vanish_next = False

    async def increment_quantity(self, owner_id, product_id):
        if self.vanish_next:
            self.vanish_next = False
            await self.delete_line(owner_id, product_id)
        return await super().increment_quantity(owner_id, product_id)


class SlowRemote(MemoryRemoteOrderStore):
    """Remote order store that yields to the loop before accepting a write."""

    def __init__(self, delay: float = 0.01) -> None:
        super().__init__()
        self.delay = delay

    async def put(self, order_id, order):
        await asyncio.sleep(self.delay)
        return await super().put(order_id, order)
