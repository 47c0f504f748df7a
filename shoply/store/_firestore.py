"""
Firestore remote order store.

Orders live in one collection, one document per order id. A put()
overwrites the whole document, so retries with the same id are safe.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore_async
from combinators import lift as L
from kungfu import Result

from shoply._types import OrderId
from shoply.domain import Order
from shoply.store._codec import order_to_document
from shoply.store._types import StoreError

logger = logging.getLogger(__name__)


@lru_cache
def ensure_firebase_app(
    credentials_path: str | None = None,
    project_id: str | None = None,
) -> firebase_admin.App:
    """
    Return the default Firebase app, initializing it exactly once.

    Uses the service account file when present, application default
    credentials otherwise.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": project_id} if project_id else None
    if credentials_path and os.path.isfile(credentials_path):
        cred: Any = credentials.Certificate(credentials_path)
    else:
        cred = credentials.ApplicationDefault()

    logger.info("Initializing Firebase app (project=%s)", project_id or "<default>")
    return firebase_admin.initialize_app(cred, options)


def firestore_client(
    credentials_path: str | None = None,
    project_id: str | None = None,
) -> Any:
    """Async Firestore client bound to the default Firebase app."""
    return firestore_async.client(ensure_firebase_app(credentials_path, project_id))


class FirestoreOrderStore:
    def __init__(self, client: Any, collection: str = "orders") -> None:
        self._client = client
        self._collection = collection

    async def put(self, order_id: OrderId, order: Order) -> Result[None, StoreError]:
        document = order_to_document(order)

        async def write() -> None:
            await self._client.collection(self._collection).document(order_id).set(document)

        return await L.catching_async(
            write,
            on_error=lambda e: StoreError(f"Failed to write order {order_id}: {e}", e),
        )


__all__ = ("ensure_firebase_app", "firestore_client", "FirestoreOrderStore")
