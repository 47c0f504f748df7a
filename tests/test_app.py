"""End-to-end wiring through open_shop with SQLite in memory."""
from __future__ import annotations

import pytest

from shoply import Settings, open_shop
from shoply.catalog import MemoryCatalog
from shoply.checkout import FailLoudPolicy, ReconcilePolicy
from shoply.domain import Direction, Product
from shoply.store import MemoryRemoteOrderStore

from _fakes import OWNER
from _results import ok_value


def settings(**overrides) -> Settings:
    values = dict(
        database_url="sqlite+aiosqlite:///:memory:",
        firebase_project_id=None,
        google_application_credentials=None,
        log_level="DEBUG",
    )
    values.update(overrides)
    return Settings(**values)


async def test_checkout_flow_through_shop():
    remote = MemoryRemoteOrderStore()
    catalog = MemoryCatalog([Product(id="P1", name="Phone", price=500, search_keywords=("phone",))])
    shop = await open_shop(settings(), remote=remote, catalog=catalog)
    try:
        shop.session.sign_in(OWNER)
        await shop.browser.load_initial()
        product = shop.browser.state.products[0]

        view = shop.cart_view
        await view.add_to_cart(product)
        await view.add_to_cart(product)
        await view.update_quantity(product.id, Direction.INCREMENT)
        view.update_address("1 Main St")
        view.update_city("Oslo")
        view.update_postal_code("123456")

        order = ok_value(await view.place_order())

        assert order.total == 1500
        assert order.id in remote.documents
        assert view.state.cart_items == ()

        await shop.history.load()
        assert [o.id for o in shop.history.state.orders] == [order.id]
    finally:
        await shop.aclose()


@pytest.mark.parametrize(
    ("name", "expected"),
    [("reconcile", ReconcilePolicy), ("fail_loud", FailLoudPolicy)],
)
async def test_mirror_policy_from_settings(name, expected):
    shop = await open_shop(settings(mirror_failure=name))
    try:
        assert isinstance(shop.checkout.policy, expected)
    finally:
        await shop.aclose()
