"""
Store — local cart table, local order mirror and the remote order store.

    from shoply import store as St

    session_factory, engine = await St.create_database()
    cart_store = St.SQLAlchemyCartStore(session_factory)
    mirror = St.SQLAlchemyOrderMirror(session_factory)
    remote = St.FirestoreOrderStore(St.firestore_client())

All adapters return Result[T, StoreError] and never raise.
"""

from __future__ import annotations

from shoply.store._types import StoreError, CartStore, OrderMirror, RemoteOrderStore
from shoply.store._memory import MemoryCartStore, MemoryOrderMirror, MemoryRemoteOrderStore
from shoply.store._sqlalchemy import (
    Base,
    CartLineTable,
    OrderTable,
    SQLAlchemyCartStore,
    SQLAlchemyOrderMirror,
    create_database,
)
from shoply.store._firestore import ensure_firebase_app, firestore_client, FirestoreOrderStore
from shoply.store._codec import order_to_document, order_from_document

__all__ = (
    # Protocols
    "StoreError",
    "CartStore",
    "OrderMirror",
    "RemoteOrderStore",
    # Memory
    "MemoryCartStore",
    "MemoryOrderMirror",
    "MemoryRemoteOrderStore",
    # SQLAlchemy
    "Base",
    "CartLineTable",
    "OrderTable",
    "SQLAlchemyCartStore",
    "SQLAlchemyOrderMirror",
    "create_database",
    # Firestore
    "ensure_firebase_app",
    "firestore_client",
    "FirestoreOrderStore",
    # Codec
    "order_to_document",
    "order_from_document",
)
