"""
Checkout policy — shipping, tier table, points earning.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from fractions import Fraction

from cartwright._types import Cents
from cartwright.loyalty import DiscountTier, DEFAULT_TIERS, DEFAULT_EARN_RATE


@dataclass(frozen=True, slots=True)
class CheckoutPolicy:
    """
    Pricing rules applied when composing a total.

    Example:
        policy = (
            CheckoutPolicy()
            .with_shipping(threshold=10000, fee=590)
            .with_earn_rate(Fraction(5, 100))
        )

    Note: Immutable — each method returns a new policy.
    """

    free_shipping_threshold: Cents = 8000
    shipping_fee: Cents = 495
    tiers: tuple[DiscountTier, ...] = DEFAULT_TIERS
    earn_rate: Fraction = DEFAULT_EARN_RATE

    def with_shipping(
        self,
        *,
        threshold: Cents | None = None,
        fee: Cents | None = None,
    ) -> CheckoutPolicy:
        return replace(
            self,
            free_shipping_threshold=self.free_shipping_threshold if threshold is None else threshold,
            shipping_fee=self.shipping_fee if fee is None else fee,
        )

    def with_tiers(self, *tiers: DiscountTier) -> CheckoutPolicy:
        return replace(self, tiers=tuple(tiers))

    def with_earn_rate(self, rate: Fraction) -> CheckoutPolicy:
        return replace(self, earn_rate=Fraction(rate))

    def shipping_for(self, subtotal: Cents) -> Cents:
        return 0 if subtotal >= self.free_shipping_threshold else self.shipping_fee

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CheckoutPolicy:
        """
        Defaults overridden by environment variables:

            CARTWRIGHT_FREE_SHIPPING_THRESHOLD  cents, e.g. 8000
            CARTWRIGHT_SHIPPING_FEE             cents, e.g. 495
            CARTWRIGHT_POINTS_EARN_RATE         points per cent, e.g. 35/1000 or 0.035

        Raises:
            ValueError: a variable is set but not a number
        """
        env = os.environ if environ is None else environ
        policy = cls()

        threshold = env.get("CARTWRIGHT_FREE_SHIPPING_THRESHOLD", "").strip()
        fee = env.get("CARTWRIGHT_SHIPPING_FEE", "").strip()
        rate = env.get("CARTWRIGHT_POINTS_EARN_RATE", "").strip()

        policy = policy.with_shipping(
            threshold=int(threshold) if threshold else None,
            fee=int(fee) if fee else None,
        )
        if rate:
            policy = policy.with_earn_rate(Fraction(rate))
        return policy


__all__ = ("CheckoutPolicy",)
