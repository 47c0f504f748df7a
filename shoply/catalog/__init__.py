"""
Catalog — product queries and the browsing feed.

    from shoply.catalog import ProductBrowser, MemoryCatalog, Filters, SortOrder

    browser = ProductBrowser(MemoryCatalog(products))
    await browser.load_initial()
    await browser.update_filters(Filters(sort=SortOrder.LOW_TO_HIGH))
"""

from __future__ import annotations

from shoply.catalog._types import (
    DEFAULT_PAGE_SIZE,
    SortOrder,
    Filters,
    ProductQuery,
    ProductPage,
    CatalogError,
    Catalog,
    sort_page,
)
from shoply.catalog._memory import MemoryCatalog
from shoply.catalog._firestore import FirestoreCatalog, product_from_snapshot
from shoply.catalog._browse import BrowseState, ProductBrowser, normalize_keyword

__all__ = (
    "DEFAULT_PAGE_SIZE",
    "SortOrder",
    "Filters",
    "ProductQuery",
    "ProductPage",
    "CatalogError",
    "Catalog",
    "sort_page",
    "MemoryCatalog",
    "FirestoreCatalog",
    "product_from_snapshot",
    "BrowseState",
    "ProductBrowser",
    "normalize_keyword",
)
