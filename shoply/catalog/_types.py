"""
Catalog query contract.

The catalog is an external product search service. The shop only needs
paged queries with filters and the distinct category/brand values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from kungfu import Result

from shoply._types import Cents
from shoply.domain import Product

DEFAULT_PAGE_SIZE = 10


class SortOrder(Enum):
    NONE = "none"
    LOW_TO_HIGH = "low_to_high"
    HIGH_TO_LOW = "high_to_low"


@dataclass(frozen=True, slots=True)
class Filters:
    """User-selected filters. Empty sets mean no restriction."""

    min_price: Cents | None = None
    max_price: Cents | None = None
    sort: SortOrder = SortOrder.NONE
    categories: frozenset[str] = frozenset()
    brands: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class ProductQuery:
    """
    One page request.

    cursor: continuation returned by the previous page, None for the first.
    keyword: matched against each product's search keywords.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    cursor: Any = None
    keyword: str = ""
    filters: Filters = Filters()


@dataclass(frozen=True, slots=True)
class ProductPage:
    """cursor is None once the catalog is exhausted."""

    products: tuple[Product, ...]
    cursor: Any = None


@dataclass(frozen=True, slots=True)
class CatalogError:
    message: str
    cause: Exception | None = None


def sort_page(products: list[Product], order: SortOrder) -> list[Product]:
    """Sorting applies to the fetched page only."""
    match order:
        case SortOrder.LOW_TO_HIGH:
            return sorted(products, key=lambda p: p.price)
        case SortOrder.HIGH_TO_LOW:
            return sorted(products, key=lambda p: p.price, reverse=True)
        case SortOrder.NONE:
            return products


class Catalog(Protocol):
    async def query(self, query: ProductQuery) -> Result[ProductPage, CatalogError]: ...

    async def categories(self) -> Result[list[str], CatalogError]: ...

    async def brands(self) -> Result[list[str], CatalogError]: ...


__all__ = (
    "DEFAULT_PAGE_SIZE",
    "SortOrder",
    "Filters",
    "ProductQuery",
    "ProductPage",
    "CatalogError",
    "sort_page",
    "Catalog",
)
