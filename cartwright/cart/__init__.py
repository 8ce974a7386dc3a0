"""
Cart — line items, persistence, revalidation against the catalog.

    from cartwright import cart as K

    engine = K.CartEngine(K.MemoryCartStore(), lookup, cart_id="user-42")
    await engine.add(K.LineItem("tee", "Tee", 1500, 2, stock_ceiling=5))

    report = await engine.revalidate()
    for removal in report.removed:
        notify(removal.key.product_id, removal.reason)
"""

from __future__ import annotations

from cartwright.cart._types import (
    LineKey,
    LineItem,
    clamp_quantity,
    RemovalReason,
    Removal,
    Clamp,
    Reprice,
    RevalidationStatus,
    RevalidationReport,
)
from cartwright.cart._lookup import (
    LookupEntry,
    LookupFailure,
    ProductLookup,
    FunctionalLookup,
    lookup_from,
    MemoryLookup,
)
from cartwright.cart._store import (
    StoreError,
    CartStore,
    Channel,
    MemoryCartStore,
)
from cartwright.cart._sqlalchemy import SQLAlchemyCartStore, CartTable, create_database
from cartwright.cart._engine import CartEngine

__all__ = (
    # Types
    "LineKey",
    "LineItem",
    "clamp_quantity",
    "RemovalReason",
    "Removal",
    "Clamp",
    "Reprice",
    "RevalidationStatus",
    "RevalidationReport",
    # Lookup
    "LookupEntry",
    "LookupFailure",
    "ProductLookup",
    "FunctionalLookup",
    "lookup_from",
    "MemoryLookup",
    # Store
    "StoreError",
    "CartStore",
    "Channel",
    "MemoryCartStore",
    "SQLAlchemyCartStore",
    "CartTable",
    "create_database",
    # Engine
    "CartEngine",
)
