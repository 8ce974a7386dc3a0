"""
Checkout — total composition, order snapshot, placement, preview graph.

    from cartwright import checkout as C

    breakdown = C.compose_total(engine.items, redeemed_points=3000, available_points=4200)

    match await C.place_order(engine, breakdown, sink):
        case Ok(order_id): ...
        case Error(e): ...

    view = await C.preview(C.CheckoutRequest(engine, balance))
"""

from __future__ import annotations

from cartwright.checkout._policy import CheckoutPolicy
from cartwright.checkout._types import (
    TotalBreakdown,
    OrderLine,
    OrderSnapshot,
    CheckoutErrorKind,
    CheckoutError,
    OrderSink,
    MemoryOrderSink,
)
from cartwright.checkout._compose import (
    DEFAULT_POLICY,
    compose_total,
    free_shipping_shortfall,
    snapshot_order,
    place_order,
)
from cartwright.checkout._graph import (
    CheckoutRequest,
    CheckoutPreview,
    RequestNode,
    ValidatedCartNode,
    BalanceNode,
    PreviewNode,
    preview,
)

__all__ = (
    # Policy
    "CheckoutPolicy",
    "DEFAULT_POLICY",
    # Types
    "TotalBreakdown",
    "OrderLine",
    "OrderSnapshot",
    "CheckoutErrorKind",
    "CheckoutError",
    "OrderSink",
    "MemoryOrderSink",
    # Composition
    "compose_total",
    "free_shipping_shortfall",
    "snapshot_order",
    "place_order",
    # Graph
    "CheckoutRequest",
    "CheckoutPreview",
    "RequestNode",
    "ValidatedCartNode",
    "BalanceNode",
    "PreviewNode",
    "preview",
)
