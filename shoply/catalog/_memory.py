"""
In-memory catalog. Cursor is the integer offset of the next page.
"""

from __future__ import annotations

from collections.abc import Iterable

from kungfu import Result, Ok

from shoply.catalog._types import CatalogError, ProductPage, ProductQuery, sort_page
from shoply.domain import Product


class MemoryCatalog:
    def __init__(self, products: Iterable[Product] = ()) -> None:
        self._products = list(products)

    def _matches(self, product: Product, query: ProductQuery) -> bool:
        f = query.filters
        if query.keyword and query.keyword not in product.search_keywords:
            return False
        if f.categories and product.category not in f.categories:
            return False
        if f.brands and product.brand not in f.brands:
            return False
        if f.min_price is not None and product.price < f.min_price:
            return False
        if f.max_price is not None and product.price > f.max_price:
            return False
        return True

    async def query(self, query: ProductQuery) -> Result[ProductPage, CatalogError]:
        matching = [p for p in self._products if self._matches(p, query)]
        offset = int(query.cursor or 0)
        end = offset + query.page_size
        page = sort_page(matching[offset:end], query.filters.sort)
        return Ok(ProductPage(
            products=tuple(page),
            cursor=end if end < len(matching) else None,
        ))

    async def categories(self) -> Result[list[str], CatalogError]:
        return Ok(sorted({p.category for p in self._products if p.category}))

    async def brands(self) -> Result[list[str], CatalogError]:
        return Ok(sorted({p.brand for p in self._products if p.brand}))


__all__ = ("MemoryCatalog",)
