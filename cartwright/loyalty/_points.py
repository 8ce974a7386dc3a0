"""
Points accounting — earning on orders, re-crediting and clawing back on returns.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Protocol

from cartwright._types import Cents, round_half_up

DEFAULT_EARN_RATE = Fraction(35, 1000)
"""3.5 points per major currency unit, expressed per cent."""


class LoyaltyBalance(Protocol):
    """Loyalty balance provider — the user's spendable points."""

    async def available_points(self) -> int: ...


def points_earned(subtotal: Cents, earn_rate: Fraction = DEFAULT_EARN_RATE) -> int:
    """Points granted for an order, floored."""
    return math.floor(subtotal * earn_rate)


def points_to_credit(points_redeemed: int, returned_value: Cents, subtotal: Cents) -> int:
    """Redeemed points handed back in proportion to the returned value."""
    if points_redeemed <= 0 or subtotal <= 0:
        return 0
    ratio = min(Fraction(1), Fraction(returned_value, subtotal))
    return round_half_up(points_redeemed * ratio)


def points_to_deduct(returned_value: Cents, earn_rate: Fraction = DEFAULT_EARN_RATE) -> int:
    """Earned points taken back for returned goods, at the earning rate."""
    return math.floor(max(0, returned_value) * earn_rate)


__all__ = (
    "DEFAULT_EARN_RATE",
    "LoyaltyBalance",
    "points_earned",
    "points_to_credit",
    "points_to_deduct",
)
