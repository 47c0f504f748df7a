"""
Domain models — products, cart lines, drafts and placed orders.

All models are frozen. An Order embeds CartLine values, never references,
so later cart mutations cannot reach into order history.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from shoply._types import Cents, OrderId, OwnerId, ProductId

POSTAL_CODE_LENGTH = 6


def is_blank(value: str) -> bool:
    return not value or value.isspace()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_millisecond(moment: datetime) -> datetime:
    """Drop sub-millisecond precision; stored timestamps are epoch millis."""
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Product:
    """Catalog entry. Owned by the catalog service, read-only here."""

    id: ProductId
    name: str
    price: Cents
    image: str = ""
    brand: str = ""
    category: str = ""
    search_keywords: tuple[str, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


class Direction(Enum):
    INCREMENT = "increment"
    DECREMENT = "decrement"


@dataclass(frozen=True, slots=True)
class CartLine:
    """
    One product in one user's cart.

    Keyed by (owner_id, product_id). Storage never keeps a line at
    quantity 0: the decrement that reaches zero deletes it.
    """

    product_id: ProductId
    owner_id: OwnerId
    name: str
    unit_price: Cents
    image_ref: str = ""
    quantity: int = 1

    @property
    def key(self) -> tuple[OwnerId, ProductId]:
        return (self.owner_id, self.product_id)

    @property
    def line_total(self) -> Cents:
        return self.unit_price * self.quantity

    @classmethod
    def from_product(cls, owner_id: OwnerId, product: Product) -> CartLine:
        return cls(
            product_id=product.id,
            owner_id=owner_id,
            name=product.name,
            unit_price=product.price,
            image_ref=product.image,
            quantity=1,
        )

    def with_quantity(self, quantity: int) -> CartLine:
        return replace(self, quantity=quantity)


def cart_total(lines: Iterable[CartLine]) -> Cents:
    """Σ unit_price × quantity."""
    return sum(line.line_total for line in lines)


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderDraft:
    """
    In-memory order under construction. Never persisted.

    line_items is a snapshot taken when the draft is built; total is
    computed once from that snapshot.
    """

    address: str
    city: str
    postal_code: str
    line_items: tuple[CartLine, ...]
    total: Cents
    computed_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_cart(
        cls,
        lines: Iterable[CartLine],
        *,
        address: str,
        city: str,
        postal_code: str,
        now: Callable[[], datetime] = utcnow,
    ) -> OrderDraft:
        snapshot = tuple(lines)
        return cls(
            address=address,
            city=city,
            postal_code=postal_code,
            line_items=snapshot,
            total=cart_total(snapshot),
            computed_at=now(),
        )


@dataclass(frozen=True, slots=True)
class Order:
    """
    A placed order. Immutable once created, never deleted by the client.

    Invariant: total == cart_total(line_items).
    """

    id: OrderId
    owner_id: OwnerId
    line_items: tuple[CartLine, ...]
    address: str
    city: str
    postal_code: str
    total: Cents
    placed_at: datetime

    @classmethod
    def place(
        cls,
        owner_id: OwnerId,
        draft: OrderDraft,
        *,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        now: Callable[[], datetime] = utcnow,
    ) -> Order:
        items = tuple(draft.line_items)
        return cls(
            id=id_factory(),
            owner_id=owner_id,
            line_items=items,
            address=draft.address,
            city=draft.city,
            postal_code=draft.postal_code,
            total=cart_total(items),
            placed_at=to_millisecond(now()),
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
