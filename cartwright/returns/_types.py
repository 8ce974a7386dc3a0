"""
Return types — request lines, refund policy, refund breakdown, errors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto

from cartwright._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Request
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ReturnLine:
    """Return `quantity` units of the order line at `index`."""

    index: int
    quantity: int


# ═══════════════════════════════════════════════════════════════════════════════
# Policy
# ═══════════════════════════════════════════════════════════════════════════════


class DeductionMode(Enum):
    """
    How a line's prorated discount is spread over its units.

    CONSERVING: every unit but the last takes the floored share, the last
                unit takes the remainder. Deductions sum to the line's
                prorated discount exactly.
    PER_UNIT:   every unit takes the rounded share. Simpler, but a full
                return of the line can refund a few cents too much or too
                little.
    """

    CONSERVING = auto()
    PER_UNIT = auto()


@dataclass(frozen=True, slots=True)
class RefundPolicy:
    """
    Example:
        policy = RefundPolicy().with_mode(DeductionMode.PER_UNIT)
    """

    mode: DeductionMode = DeductionMode.CONSERVING

    def with_mode(self, mode: DeductionMode) -> RefundPolicy:
        return replace(self, mode=mode)


# ═══════════════════════════════════════════════════════════════════════════════
# Refund
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class RefundLine:
    """
    Refund for one returned order line.

    deductions holds one entry per returned unit, in unit order.
    """

    index: int
    quantity: int
    unit_price: Cents
    prorated_discount: Cents
    deductions: tuple[Cents, ...]
    amount: Cents

    @property
    def effective_unit_prices(self) -> tuple[Cents, ...]:
        return tuple(max(0, self.unit_price - d) for d in self.deductions)


@dataclass(frozen=True, slots=True)
class Refund:
    """
    What a return pays back.

    total = items_total + shipping. Shipping is non-zero only when the
    request returns the whole order.
    """

    lines: tuple[RefundLine, ...]
    items_total: Cents
    shipping: Cents
    total: Cents
    points_to_credit: int = 0
    points_to_deduct: int = 0


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class ReturnErrorKind(Enum):
    EMPTY = auto()
    UNKNOWN_LINE = auto()
    INVALID_QUANTITY = auto()
    EXCEEDS_RETURNABLE = auto()


@dataclass(frozen=True, slots=True)
class ReturnError:
    kind: ReturnErrorKind
    message: str
    index: int | None = None


__all__ = (
    "ReturnLine",
    "DeductionMode",
    "RefundPolicy",
    "RefundLine",
    "Refund",
    "ReturnErrorKind",
    "ReturnError",
)
