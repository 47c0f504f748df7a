"""
Firestore catalog.

Products are documents with fields name, price, image, brand, category
and searchKeywords. The page cursor is the last document snapshot.
"""

from __future__ import annotations

import logging
from typing import Any

from combinators import lift as L
from kungfu import Result, Ok, Error

from shoply.catalog._types import CatalogError, ProductPage, ProductQuery, sort_page
from shoply.domain import Product

logger = logging.getLogger(__name__)


def product_from_snapshot(snapshot: Any) -> Product:
    data = snapshot.to_dict() or {}
    return Product(
        id=snapshot.id,
        name=str(data.get("name", "")),
        price=int(data.get("price", 0)),
        image=str(data.get("image", "")),
        brand=str(data.get("brand", "")),
        category=str(data.get("category", "")),
        search_keywords=tuple(data.get("searchKeywords", ())),
    )


class FirestoreCatalog:
    def __init__(self, client: Any, collection: str = "products") -> None:
        self._client = client
        self._collection = collection

    def _build(self, query: ProductQuery) -> Any:
        f = query.filters
        q = self._client.collection(self._collection)
        if query.keyword:
            q = q.where("searchKeywords", "array_contains", query.keyword)
        if f.categories:
            q = q.where("category", "in", sorted(f.categories))
        if f.brands:
            q = q.where("brand", "in", sorted(f.brands))
        if f.min_price is not None:
            q = q.where("price", ">=", f.min_price)
        if f.max_price is not None:
            q = q.where("price", "<=", f.max_price)
        if query.cursor is not None:
            q = q.start_after(query.cursor)
        return q.limit(query.page_size)

    async def query(self, query: ProductQuery) -> Result[ProductPage, CatalogError]:
        fetched = await L.catching_async(
            lambda: self._build(query).get(),
            on_error=lambda e: CatalogError(f"Product query failed: {e}", e),
        )
        match fetched:
            case Ok(snapshots):
                products = sort_page([product_from_snapshot(s) for s in snapshots], query.filters.sort)
                cursor = snapshots[-1] if len(snapshots) == query.page_size else None
                return Ok(ProductPage(products=tuple(products), cursor=cursor))
            case Error(e):
                logger.error("%s", e.message)
                return Error(e)

    async def _distinct(self, field: str) -> Result[list[str], CatalogError]:
        fetched = await L.catching_async(
            lambda: self._client.collection(self._collection).get(),
            on_error=lambda e: CatalogError(f"Failed to list {field} values: {e}", e),
        )
        match fetched:
            case Ok(snapshots):
                values = {(s.to_dict() or {}).get(field) for s in snapshots}
                return Ok(sorted(v for v in values if v))
            case Error(e):
                logger.error("%s", e.message)
                return Error(e)

    async def categories(self) -> Result[list[str], CatalogError]:
        return await self._distinct("category")

    async def brands(self) -> Result[list[str], CatalogError]:
        return await self._distinct("brand")


__all__ = ("FirestoreCatalog", "product_from_snapshot")
