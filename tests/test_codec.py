"""Tests for the order document shape shared by Firestore and the mirror."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from shoply.domain import CartLine, Order
from shoply.store import FirestoreOrderStore, order_from_document, order_to_document

from _fakes import FIXED_NOW, OWNER
from _results import error_of, ok_value


def order() -> Order:
    return Order(
        id="ord-1",
        owner_id=OWNER,
        line_items=(CartLine(product_id="P1", owner_id=OWNER, name="Phone", unit_price=500,
                             image_ref="p1.png", quantity=3),),
        address="1 Main St",
        city="Oslo",
        postal_code="123456",
        total=1500,
        placed_at=FIXED_NOW,
    )


def test_document_shape():
    doc = order_to_document(order())

    assert doc == {
        "id": "ord-1",
        "userId": OWNER,
        "items": [{
            "id": "P1", "userId": OWNER, "name": "Phone",
            "price": 500, "image": "p1.png", "quantity": 3,
        }],
        "address": "1 Main St",
        "city": "Oslo",
        "postalCode": "123456",
        "total": 1500,
        "timestamp": 1714564800000,
    }
    assert order_from_document(doc) == order()


# ---------- Firestore order store ----------

def firestore_client(set_mock: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.collection.return_value.document.return_value.set = set_mock
    return client


async def test_put_writes_document_by_id():
    set_mock = AsyncMock(return_value=None)
    client = firestore_client(set_mock)

    ok_value(await FirestoreOrderStore(client).put("ord-1", order()))

    client.collection.assert_called_once_with("orders")
    client.collection.return_value.document.assert_called_once_with("ord-1")
    set_mock.assert_awaited_once_with(order_to_document(order()))


async def test_put_failure_is_store_error():
    client = firestore_client(AsyncMock(side_effect=PermissionError("denied")))

    error = error_of(await FirestoreOrderStore(client).put("ord-1", order()))

    assert "denied" in error.message
    assert isinstance(error.cause, PermissionError)
