"""
Discount tiers — loyalty points → flat discount.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartwright._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Tier Table
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class DiscountTier:
    """Spend `points`, get `discount` cents off."""

    points: int
    discount: Cents


DEFAULT_TIERS: tuple[DiscountTier, ...] = (
    DiscountTier(points=1000, discount=500),
    DiscountTier(points=2000, discount=1000),
    DiscountTier(points=3000, discount=2000),
    DiscountTier(points=4000, discount=3500),
    DiscountTier(points=5000, discount=5000),
)
"""Hand-authored, ascending by points; discounts strictly increase."""


@dataclass(frozen=True, slots=True)
class TierHint:
    """A tier the user has points for but the order is too small to carry."""

    tier: DiscountTier
    shortfall: Cents


def _descending(tiers: tuple[DiscountTier, ...]) -> list[DiscountTier]:
    return sorted(tiers, key=lambda t: t.points, reverse=True)


# ═══════════════════════════════════════════════════════════════════════════════
# best_tier() — Highest Fitting Tier
# ═══════════════════════════════════════════════════════════════════════════════


def best_tier(
    available_points: int,
    order_total: Cents,
    tiers: tuple[DiscountTier, ...] = DEFAULT_TIERS,
) -> DiscountTier | None:
    """
    Pick the highest tier the user can afford and the order can carry.

    The discount must leave at least one cent payable, so a tier qualifies
    only when `discount <= order_total - 1`.

    Example:
        best_tier(3000, 2500)  # DiscountTier(points=3000, discount=2000)
        best_tier(999, 10000)  # None
    """
    max_discount = order_total - 1
    for tier in _descending(tiers):
        if available_points >= tier.points and tier.discount <= max_discount:
            return tier
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# remaining_points_hint() — Upsell Message
# ═══════════════════════════════════════════════════════════════════════════════


def remaining_points_hint(
    available_points: int,
    order_total: Cents,
    tiers: tuple[DiscountTier, ...] = DEFAULT_TIERS,
) -> TierHint | None:
    """
    Find the highest tier blocked only by the order total.

    `shortfall` is how many cents the order must grow by to unlock it.
    Informational only; never affects the payable total.
    """
    max_discount = order_total - 1
    for tier in _descending(tiers):
        if available_points >= tier.points and tier.discount > max_discount:
            return TierHint(tier=tier, shortfall=tier.discount - max_discount)
    return None


__all__ = (
    "DiscountTier",
    "DEFAULT_TIERS",
    "TierHint",
    "best_tier",
    "remaining_points_hint",
)
