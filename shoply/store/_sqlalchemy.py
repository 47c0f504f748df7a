"""
SQLAlchemy stores — durable local cart table and order mirror.

Usage:

    session_factory, engine = await create_database("sqlite+aiosqlite:///shoply.db")

    cart_store = SQLAlchemyCartStore(session_factory, dialect=engine.dialect.name)
    mirror = SQLAlchemyOrderMirror(session_factory, dialect=engine.dialect.name)

Insert-or-ignore is INSERT ... ON CONFLICT DO NOTHING; rowcount tells
whether the row was new. Supported dialects: sqlite, postgresql.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
    delete,
    func,
    select,
    update,
)
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import CursorResult
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.pool import StaticPool

from kungfu import Result, Ok, Error

from shoply._types import OwnerId, ProductId
from shoply.domain import CartLine, Order
from shoply.store._codec import decode_lines, encode_lines, from_millis, to_millis
from shoply.store._types import StoreError


# ═══════════════════════════════════════════════════════════════════════════════
# Base
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


# ═══════════════════════════════════════════════════════════════════════════════
# Tables
# ═══════════════════════════════════════════════════════════════════════════════


class CartLineTable(Base):
    """
    One row per (owner, product). Quantity can never go negative.

    seq is assigned max(seq) + 1 on insert and gives select_all its
    insertion order; added_at is informational only.
    """

    __tablename__ = "cart_items"
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_cart_items_quantity"),)

    owner_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    product_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_price: Mapped[int] = mapped_column(Integer, nullable=False)
    image_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    seq: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    added_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.current_timestamp()
    )

    def to_line(self) -> CartLine:
        return CartLine(
            product_id=self.product_id,
            owner_id=self.owner_id,
            name=self.name,
            unit_price=self.unit_price,
            image_ref=self.image_ref,
            quantity=self.quantity,
        )


class OrderTable(Base):
    """
    Local order mirror.

    line_items holds the JSON snapshot of the lines, placed_at_ms is epoch
    milliseconds so the value survives dialects without timezone support.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    line_items: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(255), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(6), nullable=False)
    total: Mapped[int] = mapped_column(Integer, nullable=False)
    placed_at_ms: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def to_order(self) -> Order:
        return Order(
            id=self.id,
            owner_id=self.owner_id,
            line_items=decode_lines(self.line_items),
            address=self.address,
            city=self.city,
            postal_code=self.postal_code,
            total=self.total,
            placed_at=from_millis(self.placed_at_ms),
        )


def _insert_for(dialect: str) -> Any:
    match dialect:
        case "sqlite":
            return sqlite_insert
        case "postgresql":
            return pg_insert
        case _:
            raise ValueError(f"Unsupported dialect for insert-or-ignore: {dialect!r}")


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyCartStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dialect: str = "sqlite",
    ) -> None:
        self._session_factory = session_factory
        self._insert = _insert_for(dialect)

    @staticmethod
    def _key(owner_id: OwnerId, product_id: ProductId) -> tuple[Any, Any]:
        return (
            CartLineTable.owner_id == owner_id,
            CartLineTable.product_id == product_id,
        )

    async def insert_if_absent(self, line: CartLine) -> Result[bool, StoreError]:
        try:
            async with self._session_factory() as session:
                next_seq = (
                    select(func.coalesce(func.max(CartLineTable.seq), 0) + 1)
                    .correlate(None)
                    .scalar_subquery()
                )
                stmt = (
                    self._insert(CartLineTable)
                    .values(
                        owner_id=line.owner_id,
                        product_id=line.product_id,
                        name=line.name,
                        unit_price=line.unit_price,
                        image_ref=line.image_ref,
                        quantity=line.quantity,
                        seq=next_seq,
                    )
                    .on_conflict_do_nothing(index_elements=["owner_id", "product_id"])
                )
                cursor = cast(CursorResult[Any], await session.execute(stmt))
                await session.commit()
                return Ok(cursor.rowcount > 0)

        except Exception as e:
            return Error(StoreError(f"Failed to insert cart line: {e}", e))

    async def increment_quantity(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[bool, StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    update(CartLineTable)
                    .where(*self._key(owner_id, product_id))
                    .values(quantity=CartLineTable.quantity + 1)
                )
                cursor = cast(CursorResult[Any], await session.execute(stmt))
                await session.commit()
                return Ok(cursor.rowcount > 0)

        except Exception as e:
            return Error(StoreError(f"Failed to increment quantity: {e}", e))

    async def decrement_quantity(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[int | None, StoreError]:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    update(CartLineTable)
                    .where(*self._key(owner_id, product_id), CartLineTable.quantity > 0)
                    .values(quantity=CartLineTable.quantity - 1)
                )
                remaining = (
                    await session.execute(
                        select(CartLineTable.quantity).where(*self._key(owner_id, product_id))
                    )
                ).scalar_one_or_none()
                if remaining is not None and remaining <= 0:
                    await session.execute(
                        delete(CartLineTable).where(*self._key(owner_id, product_id))
                    )
                    remaining = 0
                await session.commit()
                return Ok(remaining)

        except Exception as e:
            return Error(StoreError(f"Failed to decrement quantity: {e}", e))

    async def delete_line(
        self, owner_id: OwnerId, product_id: ProductId
    ) -> Result[bool, StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = delete(CartLineTable).where(*self._key(owner_id, product_id))
                cursor = cast(CursorResult[Any], await session.execute(stmt))
                await session.commit()
                return Ok(cursor.rowcount > 0)

        except Exception as e:
            return Error(StoreError(f"Failed to delete cart line: {e}", e))

    async def select_all(self, owner_id: OwnerId) -> Result[list[CartLine], StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(CartLineTable)
                    .where(CartLineTable.owner_id == owner_id, CartLineTable.quantity > 0)
                    .order_by(CartLineTable.seq, CartLineTable.product_id)
                )
                rows = (await session.execute(stmt)).scalars().all()
                return Ok([row.to_line() for row in rows])

        except Exception as e:
            return Error(StoreError(f"Failed to select cart lines: {e}", e))

    async def delete_all(self, owner_id: OwnerId) -> Result[int, StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = delete(CartLineTable).where(CartLineTable.owner_id == owner_id)
                cursor = cast(CursorResult[Any], await session.execute(stmt))
                await session.commit()
                return Ok(cursor.rowcount)

        except Exception as e:
            return Error(StoreError(f"Failed to clear cart: {e}", e))


# ═══════════════════════════════════════════════════════════════════════════════
# Order Mirror
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyOrderMirror:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dialect: str = "sqlite",
    ) -> None:
        self._session_factory = session_factory
        self._insert = _insert_for(dialect)

    async def insert(self, order: Order) -> Result[None, StoreError]:
        """Idempotent by order id: re-mirroring the same order is a no-op."""
        try:
            async with self._session_factory() as session:
                stmt = (
                    self._insert(OrderTable)
                    .values(
                        id=order.id,
                        owner_id=order.owner_id,
                        line_items=encode_lines(order.line_items),
                        address=order.address,
                        city=order.city,
                        postal_code=order.postal_code,
                        total=order.total,
                        placed_at_ms=to_millis(order.placed_at),
                    )
                    .on_conflict_do_nothing(index_elements=["id"])
                )
                await session.execute(stmt)
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(StoreError(f"Failed to mirror order: {e}", e))

    async def select_all(self) -> Result[list[Order], StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = select(OrderTable).order_by(OrderTable.placed_at_ms, OrderTable.id)
                rows = (await session.execute(stmt)).scalars().all()
                return Ok([row.to_order() for row in rows])

        except Exception as e:
            return Error(StoreError(f"Failed to read mirrored orders: {e}", e))


# ═══════════════════════════════════════════════════════════════════════════════
# Database Setup
# ═══════════════════════════════════════════════════════════════════════════════


async def create_database(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[async_sessionmaker[AsyncSession], AsyncEngine]:
    """Create tables and return (session_factory, engine)."""
    if url.endswith(":memory:"):
        # one shared connection, otherwise every session sees an empty database
        engine = create_async_engine(url, echo=False, poolclass=StaticPool)
    else:
        engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return async_sessionmaker(engine, expire_on_commit=False), engine


__all__ = (
    "Base",
    "CartLineTable",
    "OrderTable",
    "SQLAlchemyCartStore",
    "SQLAlchemyOrderMirror",
    "create_database",
)
