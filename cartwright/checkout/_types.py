"""
Checkout types — total breakdown, order snapshot, persistence seam.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

from cartwright._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Breakdown
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TotalBreakdown:
    """
    Payable total and its parts.

    total = max(0, subtotal + shipping - discount_code_amount - points_discount)
    points_redeemed is what the chosen tier costs, 0 without redemption.
    """

    subtotal: Cents
    shipping: Cents
    discount_code_amount: Cents
    points_discount: Cents
    total: Cents
    points_redeemed: int = 0


# ═══════════════════════════════════════════════════════════════════════════════
# Order Snapshot
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderLine:
    product_id: str
    title: str
    unit_price: Cents
    quantity: int
    selection: Mapping[str, str] = field(default_factory=dict)

    @property
    def line_total(self) -> Cents:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True)
class OrderSnapshot:
    """
    Immutable record of a placed order.

    Everything returns are prorated against; never changes after placement.
    """

    lines: tuple[OrderLine, ...]
    subtotal: Cents
    shipping: Cents
    discount_code_amount: Cents
    points_redeemed: int
    points_discount: Cents
    total: Cents
    points_earned: int = 0
    discount_code: str | None = None

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutErrorKind(Enum):
    EMPTY_CART = auto()
    PERSISTENCE = auto()


@dataclass(frozen=True, slots=True)
class CheckoutError:
    kind: CheckoutErrorKind
    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Order Persistence
# ═══════════════════════════════════════════════════════════════════════════════


class OrderSink(Protocol):
    """
    Order persistence — stores a snapshot, returns a stable order id.

    Implementations may raise; place_order() lifts failures into CheckoutError.
    """

    async def save_order(self, snapshot: OrderSnapshot) -> str: ...


class MemoryOrderSink:
    """In-memory order persistence. For testing."""

    def __init__(self) -> None:
        self.orders: dict[str, OrderSnapshot] = {}

    async def save_order(self, snapshot: OrderSnapshot) -> str:
        order_id = uuid.uuid4().hex
        self.orders[order_id] = snapshot
        return order_id


__all__ = (
    "TotalBreakdown",
    "OrderLine",
    "OrderSnapshot",
    "CheckoutErrorKind",
    "CheckoutError",
    "OrderSink",
    "MemoryOrderSink",
)
