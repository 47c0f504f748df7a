"""
Product browser — paginated feed state over a Catalog.

Search input is debounced: each keystroke cancels the pending reload
and schedules a new one. Filter changes reload immediately.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any

from kungfu import Result, Ok, Error

from shoply.catalog._types import (
    DEFAULT_PAGE_SIZE,
    Catalog,
    CatalogError,
    Filters,
    ProductPage,
    ProductQuery,
)
from shoply.domain import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BrowseState:
    products: tuple[Product, ...] = ()
    is_loading: bool = False
    search_query: str = ""
    filters: Filters = Filters()
    categories: tuple[str, ...] = ()
    brands: tuple[str, ...] = ()
    can_load_more: bool = True
    error: CatalogError | None = None


def normalize_keyword(query: str) -> str:
    return query.strip().lower()


class ProductBrowser:
    def __init__(
        self,
        catalog: Catalog,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = 0.3,
    ) -> None:
        self._catalog = catalog
        self._page_size = page_size
        self._debounce = debounce_seconds
        self._cursor: Any = None
        self._search_task: asyncio.Task[Any] | None = None
        self._state = BrowseState()

    @property
    def state(self) -> BrowseState:
        return self._state

    def _query(self) -> ProductQuery:
        return ProductQuery(
            page_size=self._page_size,
            cursor=self._cursor,
            keyword=normalize_keyword(self._state.search_query),
            filters=self._state.filters,
        )

    async def _values(self, kind: str) -> tuple[str, ...]:
        fetch = self._catalog.categories if kind == "categories" else self._catalog.brands
        match await fetch():
            case Ok(values):
                return tuple(values)
            case Error(e):
                logger.error("Failed to load %s: %s", kind, e.message)
                return ()

    async def load_initial(self) -> Result[ProductPage, CatalogError]:
        """First page plus the category and brand lists."""
        self._cursor = None
        self._state = replace(self._state, is_loading=True)

        result = await self._catalog.query(self._query())
        match result:
            case Ok(page):
                self._cursor = page.cursor
                self._state = replace(
                    self._state,
                    products=page.products,
                    categories=await self._values("categories"),
                    brands=await self._values("brands"),
                    is_loading=False,
                    can_load_more=page.cursor is not None,
                    error=None,
                )
                logger.debug("Loaded %d product(s), more=%s", len(page.products), page.cursor is not None)
            case Error(e):
                self._state = replace(
                    self._state, products=(), is_loading=False, can_load_more=False, error=e
                )
        return result

    async def load_more(self) -> Result[ProductPage, CatalogError]:
        """Append the next page. A no-op while loading or once exhausted."""
        if not self._state.can_load_more or self._state.is_loading:
            logger.debug(
                "Load more skipped (can_load_more=%s, is_loading=%s)",
                self._state.can_load_more, self._state.is_loading,
            )
            return Ok(ProductPage(products=(), cursor=self._cursor))

        self._state = replace(self._state, is_loading=True)
        result = await self._catalog.query(self._query())
        match result:
            case Ok(page):
                self._cursor = page.cursor
                self._state = replace(
                    self._state,
                    products=self._state.products + page.products,
                    is_loading=False,
                    can_load_more=page.cursor is not None,
                    error=None,
                )
            case Error(e):
                self._state = replace(self._state, is_loading=False, error=e)
        return result

    async def reset_and_load(self) -> Result[ProductPage, CatalogError]:
        self._state = replace(self._state, products=(), can_load_more=True)
        return await self.load_initial()

    async def update_filters(self, filters: Filters) -> Result[ProductPage, CatalogError]:
        self._state = replace(self._state, filters=filters)
        return await self.reset_and_load()

    def update_search_query(self, query: str) -> asyncio.Task[Any] | None:
        """
        Record the query and schedule a debounced reload.

        Returns the scheduled task, or None when the query is unchanged.
        Must be called from a running event loop.
        """
        if query == self._state.search_query:
            return None

        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()

        self._state = replace(self._state, search_query=query)
        self._search_task = asyncio.get_running_loop().create_task(self._debounced_reload())
        return self._search_task

    async def _debounced_reload(self) -> Result[ProductPage, CatalogError]:
        await asyncio.sleep(self._debounce)
        return await self.reset_and_load()

    async def aclose(self) -> None:
        task, self._search_task = self._search_task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass


__all__ = ("BrowseState", "ProductBrowser", "normalize_keyword")
