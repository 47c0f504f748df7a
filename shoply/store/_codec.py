"""
Order document codec.

One document shape for both the remote store and the local mirror:

    {"id", "userId", "items": [{"id", "userId", "name", "price", "image",
     "quantity"}], "address", "city", "postalCode", "total", "timestamp"}

timestamp is epoch milliseconds (UTC).
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import Any

from shoply.domain import CartLine, Order


def line_to_document(line: CartLine) -> dict[str, Any]:
    return {
        "id": line.product_id,
        "userId": line.owner_id,
        "name": line.name,
        "price": line.unit_price,
        "image": line.image_ref,
        "quantity": line.quantity,
    }


def line_from_document(doc: dict[str, Any]) -> CartLine:
    return CartLine(
        product_id=str(doc["id"]),
        owner_id=str(doc["userId"]),
        name=str(doc.get("name", "")),
        unit_price=int(doc["price"]),
        image_ref=str(doc.get("image", "")),
        quantity=int(doc.get("quantity", 1)),
    )


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MILLISECOND = timedelta(milliseconds=1)


def to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - EPOCH) // MILLISECOND


def from_millis(millis: int) -> datetime:
    return EPOCH + millis * MILLISECOND


def order_to_document(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "userId": order.owner_id,
        "items": [line_to_document(line) for line in order.line_items],
        "address": order.address,
        "city": order.city,
        "postalCode": order.postal_code,
        "total": order.total,
        "timestamp": to_millis(order.placed_at),
    }


def order_from_document(doc: dict[str, Any]) -> Order:
    return Order(
        id=str(doc["id"]),
        owner_id=str(doc["userId"]),
        line_items=tuple(line_from_document(item) for item in doc.get("items", [])),
        address=str(doc.get("address", "")),
        city=str(doc.get("city", "")),
        postal_code=str(doc.get("postalCode", "")),
        total=int(doc["total"]),
        placed_at=from_millis(int(doc["timestamp"])),
    )


def encode_lines(lines: tuple[CartLine, ...]) -> str:
    return json.dumps([line_to_document(line) for line in lines])


def decode_lines(raw: str) -> tuple[CartLine, ...]:
    return tuple(line_from_document(item) for item in json.loads(raw))


__all__ = (
    "line_to_document",
    "line_from_document",
    "to_millis",
    "from_millis",
    "order_to_document",
    "order_from_document",
    "encode_lines",
    "decode_lines",
)
