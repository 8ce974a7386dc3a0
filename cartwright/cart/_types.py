"""
Cart types — line items, identity keys, revalidation report.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any

from cartwright._types import Cents, Selection

# ═══════════════════════════════════════════════════════════════════════════════
# Line Identity
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineKey:
    """
    Identity of a line item: product + selection.

    Selection entries are sorted, so {"Size": "L", "Color": "Red"} and
    {"Color": "Red", "Size": "L"} are the same line.
    """

    product_id: str
    options: tuple[tuple[str, str], ...]

    @classmethod
    def of(cls, product_id: str, selection: Selection | None = None) -> LineKey:
        return cls(product_id, tuple(sorted((selection or {}).items())))


# ═══════════════════════════════════════════════════════════════════════════════
# Line Item
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One cart entry.

    title, unit_price, stock_ceiling and images are snapshots taken at add
    time and refreshed by revalidation; unit_price is not final until then.
    stock_ceiling == 0 means no limit recorded.
    """

    product_id: str
    title: str
    unit_price: Cents
    quantity: int
    selection: Mapping[str, str] = field(default_factory=dict)
    stock_ceiling: int = 0
    images: tuple[str, ...] = ()

    @property
    def key(self) -> LineKey:
        return LineKey.of(self.product_id, self.selection)

    @property
    def line_total(self) -> Cents:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> LineItem:
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "title": self.title,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "selection": dict(self.selection),
            "stock_ceiling": self.stock_ceiling,
            "images": list(self.images),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LineItem:
        return cls(
            product_id=str(data["product_id"]),
            title=str(data.get("title", "")),
            unit_price=int(data["unit_price"]),
            quantity=int(data["quantity"]),
            selection=dict(data.get("selection") or {}),
            stock_ceiling=int(data.get("stock_ceiling") or 0),
            images=tuple(data.get("images") or ()),
        )


def clamp_quantity(quantity: int, ceiling: int) -> int:
    """
    Clamp to the stock ceiling, unless the ceiling is the 0 "no limit" sentinel.
    """
    if ceiling > 0:
        return min(quantity, ceiling)
    return quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Revalidation Report
# ═══════════════════════════════════════════════════════════════════════════════


class RemovalReason(Enum):
    """Why revalidation dropped a line."""

    PRODUCT_MISSING = auto()
    OUT_OF_STOCK = auto()


@dataclass(frozen=True, slots=True)
class Removal:
    key: LineKey
    reason: RemovalReason


@dataclass(frozen=True, slots=True)
class Clamp:
    key: LineKey
    requested: int
    available: int


@dataclass(frozen=True, slots=True)
class Reprice:
    key: LineKey
    old_price: Cents
    new_price: Cents


class RevalidationStatus(Enum):
    """
    APPLIED: changes committed (possibly none).
    FAILED: lookup failed, cart left as it was.
    SUPERSEDED: a newer revalidation took over; see CartEngine.settled().
    """

    APPLIED = auto()
    FAILED = auto()
    SUPERSEDED = auto()


@dataclass(frozen=True, slots=True)
class RevalidationReport:
    """What one revalidation pass did to the cart."""

    status: RevalidationStatus
    removed: tuple[Removal, ...] = ()
    clamped: tuple[Clamp, ...] = ()
    repriced: tuple[Reprice, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.removed or self.clamped or self.repriced)


__all__ = (
    "LineKey",
    "LineItem",
    "clamp_quantity",
    "RemovalReason",
    "Removal",
    "Clamp",
    "Reprice",
    "RevalidationStatus",
    "RevalidationReport",
)
