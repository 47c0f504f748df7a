"""
Composition root.

Every store and service is constructed here and passed down explicitly;
nothing in the package reaches for a global handle.

    shop = await open_shop(Settings(database_url="sqlite+aiosqlite:///:memory:"))
    shop.session.sign_in("user-1")
    await shop.cart_view.add_to_cart(product)
    ...
    await shop.aclose()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from shoply.auth import UserSession
from shoply.cart import CartService
from shoply.catalog import Catalog, FirestoreCatalog, MemoryCatalog, ProductBrowser
from shoply.checkout import CheckoutService, policy
from shoply.settings import Settings, configure_logging, get_settings
from shoply.store import (
    FirestoreOrderStore,
    MemoryRemoteOrderStore,
    RemoteOrderStore,
    SQLAlchemyCartStore,
    SQLAlchemyOrderMirror,
    create_database,
    firestore_client,
)
from shoply.view import CartCheckout, OrderHistory

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Shop:
    settings: Settings
    engine: AsyncEngine
    session: UserSession
    cart: CartService
    checkout: CheckoutService
    cart_view: CartCheckout
    history: OrderHistory
    browser: ProductBrowser

    async def aclose(self) -> None:
        await self.browser.aclose()
        await self.engine.dispose()


def _uses_firebase(settings: Settings) -> bool:
    return bool(settings.firebase_project_id or settings.google_application_credentials)


async def open_shop(
    settings: Settings | None = None,
    *,
    remote: RemoteOrderStore | None = None,
    catalog: Catalog | None = None,
    session: UserSession | None = None,
) -> Shop:
    """
    Build the shop from settings.

    Without Firebase configuration and without explicit collaborators the
    remote order store and catalog are in-memory.
    """
    settings = settings if settings is not None else get_settings()
    configure_logging(settings.log_level)

    session_factory, engine = await create_database(settings.database_url)
    dialect = engine.dialect.name

    if (remote is None or catalog is None) and _uses_firebase(settings):
        client = firestore_client(
            settings.google_application_credentials, settings.firebase_project_id
        )
        if remote is None:
            remote = FirestoreOrderStore(client, settings.orders_collection)
        if catalog is None:
            catalog = FirestoreCatalog(client, settings.products_collection)

    if remote is None:
        logger.warning("No Firebase configuration; orders are kept in memory only")
        remote = MemoryRemoteOrderStore()
    if catalog is None:
        catalog = MemoryCatalog()

    user = session if session is not None else UserSession()
    cart = CartService(SQLAlchemyCartStore(session_factory, dialect))
    checkout = CheckoutService(
        remote,
        SQLAlchemyOrderMirror(session_factory, dialect),
        policy=policy.from_name(settings.mirror_failure),
    )

    return Shop(
        settings=settings,
        engine=engine,
        session=user,
        cart=cart,
        checkout=checkout,
        cart_view=CartCheckout(user, cart, checkout),
        history=OrderHistory(user, checkout),
        browser=ProductBrowser(
            catalog,
            page_size=settings.page_size,
            debounce_seconds=settings.search_debounce_seconds,
        ),
    )


__all__ = ("Shop", "open_shop")
