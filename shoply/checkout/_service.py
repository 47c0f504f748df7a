"""
Checkout service — turns a validated draft into a placed order.

Placement is a two-step saga: the remote order store is the commit point
(pivot), the local mirror follows. A remote failure aborts before the
mirror is touched, so the mirror never holds an order the remote store
does not have. A mirror failure after the remote commit is resolved by
the configured MirrorPolicy.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime

from kungfu import Result, Ok, Error, LazyCoroResult

from shoply import saga as S
from shoply._errors import Errors, ShopError
from shoply._types import OrderId, OwnerId
from shoply.cart import resolve_owner
from shoply.checkout._policy import FailLoudPolicy, MirrorPolicy, ReconcilePolicy, reconcile
from shoply.domain import POSTAL_CODE_LENGTH, Order, OrderDraft, cart_total, is_blank, utcnow
from shoply.store import OrderMirror, RemoteOrderStore, StoreError

logger = logging.getLogger(__name__)

REMOTE_STEP = "remote"
MIRROR_STEP = "mirror"


def _attempt(
    call: Callable[[], Awaitable[Result[None, StoreError]]],
) -> LazyCoroResult[None, StoreError]:
    """Lift a store call, folding a stray exception into StoreError."""
    async def impl() -> Result[None, StoreError]:
        try:
            return await call()
        except Exception as e:
            return Error(StoreError(str(e), e))
    return LazyCoroResult(impl)


def validate_draft(owner_id: OwnerId, draft: OrderDraft) -> Result[OrderDraft, ShopError]:
    """Structural checks run before any write."""
    if not draft.line_items:
        return Error(Errors.invalid_order("Cart is empty"))
    for label, value in (
        ("address", draft.address),
        ("city", draft.city),
        ("postal code", draft.postal_code),
    ):
        if is_blank(value):
            return Error(Errors.invalid_order(f"The {label} is blank"))
    if len(draft.postal_code) > POSTAL_CODE_LENGTH:
        return Error(Errors.invalid_order(
            f"Postal code longer than {POSTAL_CODE_LENGTH} characters"
        ))
    for line in draft.line_items:
        if line.quantity <= 0:
            return Error(Errors.invalid_order(f"Line {line.product_id} has quantity {line.quantity}"))
        if line.owner_id != owner_id:
            return Error(Errors.invalid_order(f"Line {line.product_id} belongs to another user"))
    if draft.total != cart_total(draft.line_items):
        return Error(Errors.invalid_order("Draft total does not match its line items"))
    return Ok(draft)


class CheckoutService:
    def __init__(
        self,
        remote: RemoteOrderStore,
        mirror: OrderMirror,
        *,
        policy: MirrorPolicy | None = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._remote = remote
        self._mirror = mirror
        self._policy: MirrorPolicy = policy if policy is not None else reconcile()
        self._id_factory = id_factory
        self._clock = clock
        # remote-committed orders whose mirror write is still owed
        self._pending: dict[OrderId, Order] = {}
        self._retry_lock = asyncio.Lock()

    @property
    def policy(self) -> MirrorPolicy:
        return self._policy

    @property
    def pending_mirrors(self) -> tuple[Order, ...]:
        return tuple(self._pending.values())

    async def place_order(
        self, owner_id: OwnerId | None, draft: OrderDraft
    ) -> Result[Order, ShopError]:
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        match validate_draft(owner, draft):
            case Error(e):
                logger.warning("Rejected order draft for %s: %s", owner, e.message)
                return Error(e)
            case Ok(_):
                pass

        order = Order.place(owner, draft, id_factory=self._id_factory, now=self._clock)

        result = await S.run([
            S.step(REMOTE_STEP, _attempt(lambda: self._remote.put(order.id, order)), pivot=True),
            S.step(MIRROR_STEP, _attempt(lambda: self._mirror.insert(order))),
        ])

        match result:
            case Ok(_):
                logger.info("Placed order %s for %s (total=%d)", order.id, owner, order.total)
                return Ok(order)

            case Error(failure) if not failure.committed:
                logger.error("Remote write failed for order %s: %s", order.id, failure.error.message)
                return Error(Errors.remote_write(
                    f"Order could not be placed: {failure.error.message}",
                    failure.error,
                ))

            case Error(failure):
                return self._on_mirror_failure(order, failure.error)

    def _on_mirror_failure(self, order: Order, error: StoreError) -> Result[Order, ShopError]:
        match self._policy:
            case ReconcilePolicy():
                self._pending[order.id] = order
                logger.warning(
                    "Order %s placed remotely, mirror write failed (%s); queued for retry",
                    order.id, error.message,
                )
                return Ok(order)
            case FailLoudPolicy():
                logger.error("Order %s placed remotely, mirror write failed: %s", order.id, error.message)
                return Error(Errors.mirror_write(
                    f"Order {order.id} was placed but could not be saved locally: {error.message}",
                    order,
                    error,
                ))

    async def retry_pending_mirrors(self) -> Result[int, ShopError]:
        """
        Write queued orders to the mirror.

        Returns Ok(flushed count); Error(STORAGE_FAILURE) if any order is
        still pending afterwards.
        """
        async with self._retry_lock:
            flushed = 0
            last_error: StoreError | None = None

            for order in list(self._pending.values()):
                match await _attempt(lambda: self._mirror.insert(order)):
                    case Ok(_):
                        del self._pending[order.id]
                        flushed += 1
                    case Error(e):
                        last_error = e

            if flushed:
                logger.info("Mirrored %d pending order(s)", flushed)
            if last_error is not None:
                logger.error("%d order(s) still pending mirror: %s", len(self._pending), last_error.message)
                return Error(Errors.storage(
                    f"{len(self._pending)} order(s) could not be mirrored", last_error
                ))
            return Ok(flushed)

    async def get_orders(self, owner_id: OwnerId | None) -> Result[list[Order], ShopError]:
        """Mirrored orders for the owner plus any still awaiting the mirror. Never writes."""
        match resolve_owner(owner_id):
            case Error(e):
                return Error(e)
            case Ok(owner):
                pass

        match await _read(self._mirror):
            case Error(e):
                logger.error("Failed to read order mirror for %s: %s", owner, e.message)
                return Error(Errors.storage(f"Order history unavailable: {e.message}", e))
            case Ok(mirrored):
                pass

        orders = {o.id: o for o in mirrored if o.owner_id == owner}
        for order in self._pending.values():
            if order.owner_id == owner:
                orders.setdefault(order.id, order)
        return Ok(sorted(orders.values(), key=lambda o: o.placed_at))


async def _read(mirror: OrderMirror) -> Result[list[Order], StoreError]:
    try:
        return await mirror.select_all()
    except Exception as e:
        return Error(StoreError(str(e), e))


__all__ = ("CheckoutService", "validate_draft")
