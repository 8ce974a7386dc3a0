"""
Loyalty — discount tiers and points accounting.

    from cartwright import loyalty as Y

    tier = Y.best_tier(available_points=3000, order_total=2500)
    hint = Y.remaining_points_hint(available_points=5000, order_total=2500)
"""

from __future__ import annotations

from cartwright.loyalty._tiers import (
    DiscountTier,
    DEFAULT_TIERS,
    TierHint,
    best_tier,
    remaining_points_hint,
)
from cartwright.loyalty._points import (
    DEFAULT_EARN_RATE,
    LoyaltyBalance,
    points_earned,
    points_to_credit,
    points_to_deduct,
)

__all__ = (
    "DiscountTier",
    "DEFAULT_TIERS",
    "TierHint",
    "best_tier",
    "remaining_points_hint",
    "DEFAULT_EARN_RATE",
    "LoyaltyBalance",
    "points_earned",
    "points_to_credit",
    "points_to_deduct",
)
