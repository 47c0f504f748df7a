"""Tests for order placement, mirror policies and order history reads."""
from __future__ import annotations

from dataclasses import replace

import pytest

from shoply import ErrorKind
from shoply.checkout import CheckoutService, policy
from shoply.domain import CartLine, Direction, OrderDraft
from shoply.store import MemoryOrderMirror, MemoryRemoteOrderStore

from _fakes import FIXED_NOW, OTHER, OWNER, FailingMirror, FailingRemote, RaisingRemote
from _results import error_of, ok_value


def line(product_id: str = "P1", price: int = 500, quantity: int = 1, owner: str = OWNER) -> CartLine:
    return CartLine(product_id=product_id, owner_id=owner, name=product_id, unit_price=price, quantity=quantity)


def draft(lines, address="1 Main St", city="Oslo", postal_code="123456") -> OrderDraft:
    return OrderDraft.from_cart(lines, address=address, city=city, postal_code=postal_code)


# ---------- Happy path ----------

async def test_place_order_writes_remote_then_mirror(checkout, remote, mirror):
    order = ok_value(await checkout.place_order(OWNER, draft([line(quantity=3), line("P2", 150)])))

    assert order.total == 3 * 500 + 150
    assert order.owner_id == OWNER
    assert order.placed_at == FIXED_NOW
    assert remote.documents[order.id] == order
    assert ok_value(await mirror.select_all()) == [order]


async def test_order_ids_are_unique(checkout):
    first = ok_value(await checkout.place_order(OWNER, draft([line()])))
    second = ok_value(await checkout.place_order(OWNER, draft([line()])))
    assert first.id != second.id


async def test_order_snapshot_is_frozen(checkout, cart, p1):
    """Later cart changes do not reach the placed order."""
    await cart.add_to_cart(OWNER, p1)
    lines = ok_value(await cart.get_cart_items(OWNER))
    order = ok_value(await checkout.place_order(OWNER, draft(lines)))

    await cart.update_quantity(OWNER, "P1", Direction.INCREMENT)
    await cart.update_quantity(OWNER, "P1", Direction.INCREMENT)

    stored = ok_value(await checkout.get_orders(OWNER))[0]
    assert stored.total == 500
    assert stored.line_items[0].quantity == 1


# ---------- Validation ----------

@pytest.mark.parametrize(
    "make_draft",
    [
        pytest.param(lambda: draft([]), id="empty-cart"),
        pytest.param(lambda: draft([line()], address="  "), id="blank-address"),
        pytest.param(lambda: draft([line()], city=""), id="blank-city"),
        pytest.param(lambda: draft([line()], postal_code=""), id="blank-postal-code"),
        pytest.param(lambda: draft([line()], postal_code="1234567"), id="postal-code-too-long"),
        pytest.param(lambda: draft([line(quantity=0)]), id="zero-quantity"),
        pytest.param(lambda: draft([line(owner=OTHER)]), id="foreign-line"),
        pytest.param(lambda: replace(draft([line()]), total=1), id="total-mismatch"),
    ],
)
async def test_invalid_draft_performs_zero_writes(make_draft):
    remote, mirror = MemoryRemoteOrderStore(), MemoryOrderMirror()
    checkout = CheckoutService(remote, mirror)

    error = error_of(await checkout.place_order(OWNER, make_draft()))

    assert error.kind is ErrorKind.INVALID_ORDER
    assert remote.documents == {}
    assert ok_value(await mirror.select_all()) == []


async def test_place_order_requires_owner(checkout):
    error = error_of(await checkout.place_order(None, draft([line()])))
    assert error.kind is ErrorKind.UNAUTHENTICATED


# ---------- Remote failure ----------

@pytest.mark.parametrize("remote_store", [FailingRemote(), RaisingRemote()], ids=["error", "exception"])
async def test_remote_failure_leaves_mirror_untouched(remote_store):
    mirror = MemoryOrderMirror()
    checkout = CheckoutService(remote_store, mirror)

    error = error_of(await checkout.place_order(OWNER, draft([line()])))

    assert error.kind is ErrorKind.REMOTE_WRITE_FAILURE
    assert error.cause is not None
    assert ok_value(await mirror.select_all()) == []
    assert checkout.pending_mirrors == ()


# ---------- Mirror failure ----------

async def test_mirror_failure_reconciles_by_default():
    """The remote write is the commit point: success, order queued for the mirror."""
    remote, mirror = MemoryRemoteOrderStore(), FailingMirror()
    checkout = CheckoutService(remote, mirror)

    order = ok_value(await checkout.place_order(OWNER, draft([line()])))

    assert order.id in remote.documents
    assert checkout.pending_mirrors == (order,)
    # history still shows the order while the mirror is behind
    assert [o.id for o in ok_value(await checkout.get_orders(OWNER))] == [order.id]


async def test_retry_pending_mirrors_flushes_queue():
    mirror = FailingMirror()
    checkout = CheckoutService(MemoryRemoteOrderStore(), mirror)
    order = ok_value(await checkout.place_order(OWNER, draft([line()])))

    assert error_of(await checkout.retry_pending_mirrors()).kind is ErrorKind.STORAGE_FAILURE
    assert checkout.pending_mirrors == (order,)

    mirror.healthy = True
    assert ok_value(await checkout.retry_pending_mirrors()) == 1
    assert checkout.pending_mirrors == ()
    assert ok_value(await mirror.select_all()) == [order]


async def test_mirror_failure_fail_loud_policy():
    remote, mirror = MemoryRemoteOrderStore(), FailingMirror()
    checkout = CheckoutService(remote, mirror, policy=policy.fail_loud())

    error = error_of(await checkout.place_order(OWNER, draft([line()])))

    assert error.kind is ErrorKind.MIRROR_WRITE_FAILURE
    assert error.order.id in remote.documents
    assert checkout.pending_mirrors == ()


def test_policy_from_name():
    assert policy.from_name("reconcile") == policy.reconcile()
    assert policy.from_name("fail_loud") == policy.fail_loud()
    with pytest.raises(ValueError):
        policy.from_name("retry_forever")


# ---------- History ----------

async def test_get_orders_filters_by_owner(checkout):
    mine = ok_value(await checkout.place_order(OWNER, draft([line()])))
    ok_value(await checkout.place_order(OTHER, draft([line(owner=OTHER)])))

    assert ok_value(await checkout.get_orders(OWNER)) == [mine]
