"""Shared fixtures: in-memory stores and services wired for one signed-in user."""
from __future__ import annotations

import pytest

from shoply.auth import UserSession
from shoply.cart import CartService
from shoply.checkout import CheckoutService
from shoply.domain import Product
from shoply.store import (
    MemoryCartStore,
    MemoryOrderMirror,
    MemoryRemoteOrderStore,
    create_database,
)
from shoply.view import CartCheckout

from _fakes import FIXED_NOW, OWNER


# ---------- Products ----------

@pytest.fixture
def p1() -> Product:
    return Product(id="P1", name="Phone", price=500, image="p1.png", brand="Acme", category="phones")


@pytest.fixture
def p2() -> Product:
    return Product(id="P2", name="Case", price=150, image="p2.png", brand="Acme", category="accessories")


# ---------- Services ----------

@pytest.fixture
def cart_store() -> MemoryCartStore:
    return MemoryCartStore()


@pytest.fixture
def cart(cart_store) -> CartService:
    return CartService(cart_store)


@pytest.fixture
def remote() -> MemoryRemoteOrderStore:
    return MemoryRemoteOrderStore()


@pytest.fixture
def mirror() -> MemoryOrderMirror:
    return MemoryOrderMirror()


@pytest.fixture
def checkout(remote, mirror) -> CheckoutService:
    return CheckoutService(remote, mirror, clock=lambda: FIXED_NOW)


@pytest.fixture
def session() -> UserSession:
    return UserSession(OWNER)


@pytest.fixture
def view(session, cart, checkout) -> CartCheckout:
    return CartCheckout(session, cart, checkout)


# ---------- SQL ----------

@pytest.fixture
async def database():
    session_factory, engine = await create_database("sqlite+aiosqlite:///:memory:")
    yield session_factory
    await engine.dispose()
