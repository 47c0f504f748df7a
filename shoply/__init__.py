"""
shoply — cart and checkout consistency core.

    from shoply import open_shop, Settings

    shop = await open_shop(Settings())
    shop.session.sign_in(uid)
    await shop.cart_view.add_to_cart(product)
    result = await shop.cart_view.place_order()

Subpackages:
    shoply.domain    — products, cart lines, drafts, orders
    shoply.store     — cart table, order mirror, remote order store
    shoply.cart      — cart mutations
    shoply.checkout  — order placement, shipping form, mirror policies
    shoply.saga      — multi-store writes with compensation
    shoply.view      — view-state snapshots
    shoply.catalog   — product queries and browsing
    shoply.auth      — current-user resolution
"""

from __future__ import annotations

from shoply._types import Result, Ok, Error, LazyCoroResult, OwnerId, ProductId, OrderId, Cents
from shoply._errors import ErrorKind, ShopError, Errors
from shoply.settings import Settings, get_settings, configure_logging
from shoply.app import Shop, open_shop

__version__ = "0.1.0"

__all__ = (
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    "OwnerId",
    "ProductId",
    "OrderId",
    "Cents",
    "ErrorKind",
    "ShopError",
    "Errors",
    "Settings",
    "get_settings",
    "configure_logging",
    "Shop",
    "open_shop",
    "__version__",
)
