"""Tests for discount tier selection and points accounting."""

from fractions import Fraction

import pytest

from cartwright.loyalty import (
    DiscountTier,
    DEFAULT_TIERS,
    best_tier,
    remaining_points_hint,
    points_earned,
    points_to_credit,
    points_to_deduct,
)


class TestBestTier:
    """Highest affordable tier that keeps one cent payable."""

    def test_prefers_highest_qualifying_tier(self):
        assert best_tier(3000, 2500) == DiscountTier(points=3000, discount=2000)

    def test_points_cap_the_tier(self):
        assert best_tier(2500, 100000) == DiscountTier(points=2000, discount=1000)

    def test_total_caps_the_tier(self):
        # 5000 points, but only 3500 fits under 4000 - 1
        assert best_tier(5000, 4000) == DiscountTier(points=4000, discount=3500)

    def test_discount_equal_to_total_is_refused(self):
        assert best_tier(1000, 500) is None
        assert best_tier(1000, 501) == DiscountTier(points=1000, discount=500)

    def test_not_enough_points(self):
        assert best_tier(999, 100000) is None

    def test_tier_order_does_not_matter(self):
        shuffled = tuple(reversed(DEFAULT_TIERS))
        assert best_tier(3000, 2500, shuffled) == best_tier(3000, 2500)

    @pytest.mark.parametrize("points", [0, 999, 1000, 2999, 5000, 12000])
    @pytest.mark.parametrize("total", [1, 500, 501, 2001, 3501, 5001, 100000])
    def test_never_discounts_below_one_cent(self, points: int, total: int):
        tier = best_tier(points, total)
        if tier is not None:
            assert total - tier.discount >= 1
            assert points >= tier.points


class TestRemainingPointsHint:
    """Upsell when points exceed what the order can carry."""

    def test_shortfall_for_blocked_tier(self):
        hint = remaining_points_hint(5000, 2500)

        assert hint is not None
        assert hint.tier.points == 5000
        assert hint.shortfall == 5000 - 2499

    def test_no_hint_when_best_tier_fits(self):
        assert remaining_points_hint(3000, 100000) is None

    def test_no_hint_without_points(self):
        assert remaining_points_hint(500, 100) is None


class TestPoints:
    def test_points_earned_floors(self):
        assert points_earned(10000) == 350
        assert points_earned(2999) == 104
        assert points_earned(1000, Fraction(1, 100)) == 10

    def test_points_to_credit_is_proportional(self):
        assert points_to_credit(3000, 5000, 10000) == 1500
        assert points_to_credit(1000, 1, 3) == 333

    def test_points_to_credit_caps_at_redeemed(self):
        assert points_to_credit(3000, 20000, 10000) == 3000

    def test_nothing_to_credit(self):
        assert points_to_credit(0, 5000, 10000) == 0
        assert points_to_credit(3000, 5000, 0) == 0

    def test_points_to_deduct(self):
        assert points_to_deduct(4500) == 157
        assert points_to_deduct(-10) == 0
