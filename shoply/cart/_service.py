"""
Cart service — the single authority for cart mutations.

Every operation takes the owner explicitly, returns Result[T, ShopError]
and converts StoreError into STORAGE_FAILURE with the cause preserved.
A store that raises instead of returning Error is folded the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from kungfu import Result, Ok, Error

from shoply._errors import Errors, ShopError
from shoply._types import OwnerId, ProductId
from shoply.domain import CartLine, Direction, Product, is_blank
from shoply.store import CartStore, StoreError

logger = logging.getLogger(__name__)


def resolve_owner(owner_id: OwnerId | None) -> Result[OwnerId, ShopError]:
    if owner_id is None or is_blank(owner_id):
        return Error(Errors.unauthenticated())
    return Ok(owner_id)


async def _guarded[T](
    call: Callable[[], Awaitable[Result[T, StoreError]]],
) -> Result[T, StoreError]:
    try:
        return await call()
    except Exception as e:
        return Error(StoreError(str(e), e))


def _storage_failure(action: str, owner_id: OwnerId, e: StoreError) -> ShopError:
    logger.error("Cart %s failed for owner=%s: %s", action, owner_id, e.message)
    return Errors.storage(f"Cart {action} failed: {e.message}", e)


class CartService:
    def __init__(self, store: CartStore) -> None:
        self._store = store

    async def add_to_cart(
        self, owner_id: OwnerId | None, product: Product
    ) -> Result[None, ShopError]:
        """
        Add one unit of product.

        Insert-or-ignore first; when the line already exists (including a
        concurrent duplicate insert) fall back to incrementing it. If the
        line was removed between the two, the insert is tried once more.
        """
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        line = CartLine.from_product(owner, product)

        match await _guarded(lambda: self._store.insert_if_absent(line)):
            case Error(e):
                return Error(_storage_failure("add", owner, e))
            case Ok(True):
                logger.debug("Added %s to cart of %s", product.id, owner)
                return Ok(None)
            case Ok(_):
                pass

        match await _guarded(lambda: self._store.increment_quantity(owner, product.id)):
            case Error(e):
                return Error(_storage_failure("add", owner, e))
            case Ok(True):
                return Ok(None)
            case Ok(_):
                logger.warning("Cart line %s vanished during add for %s, re-inserting", product.id, owner)

        match await _guarded(lambda: self._store.insert_if_absent(line)):
            case Error(e):
                return Error(_storage_failure("add", owner, e))
            case Ok(inserted):
                if not inserted:
                    logger.warning("Cart line %s for %s changed again during add", product.id, owner)
                return Ok(None)

    async def update_quantity(
        self,
        owner_id: OwnerId | None,
        product_id: ProductId,
        direction: Direction,
    ) -> Result[None, ShopError]:
        """
        Bump a line up or down by one.

        A missing line is a successful no-op in both directions. The
        decrement that reaches zero removes the line inside the store.
        """
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        if direction is Direction.INCREMENT:
            match await _guarded(lambda: self._store.increment_quantity(owner, product_id)):
                case Error(e):
                    return Error(_storage_failure("increment", owner, e))
                case Ok(found):
                    if not found:
                        logger.warning("Increment of missing line %s for %s ignored", product_id, owner)
                    return Ok(None)

        match await _guarded(lambda: self._store.decrement_quantity(owner, product_id)):
            case Error(e):
                return Error(_storage_failure("decrement", owner, e))
            case Ok(None):
                logger.warning("Decrement of missing line %s for %s ignored", product_id, owner)
                return Ok(None)
            case Ok(0):
                logger.debug("Removed %s from cart of %s at zero quantity", product_id, owner)
                return Ok(None)
            case Ok(_):
                return Ok(None)

    async def delete_from_cart(
        self, owner_id: OwnerId | None, product_id: ProductId
    ) -> Result[None, ShopError]:
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        match await _guarded(lambda: self._store.delete_line(owner, product_id)):
            case Error(e):
                return Error(_storage_failure("delete", owner, e))
            case Ok(_):
                return Ok(None)

    async def get_cart_items(
        self, owner_id: OwnerId | None
    ) -> Result[list[CartLine], ShopError]:
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        match await _guarded(lambda: self._store.select_all(owner)):
            case Error(e):
                return Error(_storage_failure("read", owner, e))
            case Ok(lines):
                return Ok([line for line in lines if line.quantity > 0])

    async def clear_cart(self, owner_id: OwnerId | None) -> Result[None, ShopError]:
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        match await _guarded(lambda: self._store.delete_all(owner)):
            case Error(e):
                return Error(_storage_failure("clear", owner, e))
            case Ok(removed):
                logger.debug("Cleared %d line(s) from cart of %s", removed, owner)
                return Ok(None)


__all__ = ("CartService", "resolve_owner")
