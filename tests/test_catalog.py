"""Tests for catalog queries and the product browser."""
from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from shoply.catalog import (
    Filters,
    FirestoreCatalog,
    MemoryCatalog,
    ProductBrowser,
    ProductQuery,
    SortOrder,
)
from shoply.domain import Product

from _results import error_of, ok_value


def make_products(n: int = 25) -> list[Product]:
    return [
        Product(
            id=f"P{i:02d}",
            name=f"Item {i}",
            price=(i * 37) % 1000,
            brand="Acme" if i % 2 else "Globex",
            category="phones" if i % 3 == 0 else "accessories",
            search_keywords=("item", f"item{i}"),
        )
        for i in range(n)
    ]


@pytest.fixture
def catalog() -> MemoryCatalog:
    return MemoryCatalog(make_products())


# ---------- Queries ----------

async def test_pages_until_exhausted(catalog):
    first = ok_value(await catalog.query(ProductQuery(page_size=10)))
    second = ok_value(await catalog.query(ProductQuery(page_size=10, cursor=first.cursor)))
    third = ok_value(await catalog.query(ProductQuery(page_size=10, cursor=second.cursor)))

    assert [len(p.products) for p in (first, second, third)] == [10, 10, 5]
    assert third.cursor is None


async def test_filters_and_keyword(catalog):
    page = ok_value(await catalog.query(ProductQuery(
        page_size=50,
        keyword="item",
        filters=Filters(categories=frozenset({"phones"}), brands=frozenset({"Acme"}), max_price=600),
    )))

    assert page.products
    for product in page.products:
        assert product.category == "phones"
        assert product.brand == "Acme"
        assert product.price <= 600


async def test_sort_applies_within_page(catalog):
    page = ok_value(await catalog.query(
        ProductQuery(page_size=10, filters=Filters(sort=SortOrder.HIGH_TO_LOW))
    ))
    prices = [p.price for p in page.products]
    assert prices == sorted(prices, reverse=True)


async def test_distinct_categories_and_brands(catalog):
    assert ok_value(await catalog.categories()) == ["accessories", "phones"]
    assert ok_value(await catalog.brands()) == ["Acme", "Globex"]


# ---------- Firestore ----------

def snapshot(doc_id: str, **data):
    snap = MagicMock()
    snap.id = doc_id
    snap.to_dict.return_value = data
    return snap


async def test_firestore_query_builds_filters_and_cursor():
    query = MagicMock()
    query.where.return_value = query
    query.start_after.return_value = query
    query.limit.return_value = query
    query.get = AsyncMock(return_value=[
        snapshot("a", name="A", price=300, brand="Acme", category="phones", searchKeywords=["a"]),
        snapshot("b", name="B", price=100, brand="Acme", category="phones", searchKeywords=["b"]),
    ])
    client = MagicMock()
    client.collection.return_value = query

    page = ok_value(await FirestoreCatalog(client).query(ProductQuery(
        page_size=2,
        cursor="last-doc",
        keyword="phone",
        filters=Filters(min_price=50, sort=SortOrder.LOW_TO_HIGH, categories=frozenset({"phones"})),
    )))

    client.collection.assert_called_once_with("products")
    query.where.assert_any_call("searchKeywords", "array_contains", "phone")
    query.where.assert_any_call("category", "in", ["phones"])
    query.where.assert_any_call("price", ">=", 50)
    query.start_after.assert_called_once_with("last-doc")
    query.limit.assert_called_once_with(2)
    assert [p.id for p in page.products] == ["b", "a"]
    # a full page means there may be more
    assert page.cursor is not None


async def test_firestore_query_error_is_result():
    query = MagicMock()
    query.limit.return_value = query
    query.get = AsyncMock(side_effect=RuntimeError("deadline exceeded"))
    client = MagicMock()
    client.collection.return_value = query

    error = error_of(await FirestoreCatalog(client).query(ProductQuery()))
    assert "deadline exceeded" in error.message


# ---------- Browser ----------

async def test_browser_initial_load_and_more(catalog):
    browser = ProductBrowser(catalog, page_size=10)

    await browser.load_initial()
    assert len(browser.state.products) == 10
    assert browser.state.categories == ("accessories", "phones")
    assert browser.state.can_load_more

    await browser.load_more()
    await browser.load_more()
    assert len(browser.state.products) == 25
    assert not browser.state.can_load_more

    # exhausted: further calls change nothing
    await browser.load_more()
    assert len(browser.state.products) == 25


async def test_browser_update_filters_resets(catalog):
    browser = ProductBrowser(catalog, page_size=10)
    await browser.load_initial()
    await browser.load_more()

    await browser.update_filters(Filters(brands=frozenset({"Globex"})))

    assert browser.state.products
    assert all(p.brand == "Globex" for p in browser.state.products)
    assert len(browser.state.products) <= 10


async def test_search_is_debounced_and_superseded(catalog):
    browser = ProductBrowser(catalog, page_size=50, debounce_seconds=0.01)

    first = browser.update_search_query("ITEM3")
    second = browser.update_search_query("  Item7 ")
    await asyncio.gather(first, second, return_exceptions=True)

    assert first.cancelled()
    assert browser.state.search_query == "  Item7 "
    assert [p.id for p in browser.state.products] == ["P07"]
    assert browser.update_search_query("  Item7 ") is None
    await browser.aclose()
