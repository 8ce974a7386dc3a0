"""
Checkout total composition, order snapshot, order placement.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from kungfu import Result, Ok, Error
from combinators import lift as L

from cartwright._types import Cents
from cartwright.cart import CartEngine, LineItem
from cartwright.loyalty import best_tier, points_earned
from cartwright.checkout._policy import CheckoutPolicy
from cartwright.checkout._types import (
    TotalBreakdown,
    OrderLine,
    OrderSnapshot,
    CheckoutError,
    CheckoutErrorKind,
    OrderSink,
)

logger = logging.getLogger(__name__)

DEFAULT_POLICY = CheckoutPolicy()

# ═══════════════════════════════════════════════════════════════════════════════
# compose_total()
# ═══════════════════════════════════════════════════════════════════════════════


def compose_total(
    items: Iterable[LineItem],
    policy: CheckoutPolicy = DEFAULT_POLICY,
    *,
    discount_code_amount: Cents = 0,
    redeemed_points: int = 0,
    available_points: int = 0,
) -> TotalBreakdown:
    """
    Compose the payable total for a cart.

    Points are redeemed only when the caller opts in (redeemed_points > 0),
    never beyond the available balance, at the best tier the order can carry.

    Example:
        breakdown = compose_total(engine.items, discount_code_amount=700)
        breakdown.total  # what the shopper pays
    """
    subtotal = sum(item.line_total for item in items)
    shipping = policy.shipping_for(subtotal)

    points_discount = 0
    points_redeemed = 0
    if redeemed_points > 0:
        tier = best_tier(
            min(redeemed_points, available_points),
            subtotal + shipping,
            policy.tiers,
        )
        if tier is not None:
            points_discount = tier.discount
            points_redeemed = tier.points

    total = max(0, subtotal + shipping - discount_code_amount - points_discount)
    return TotalBreakdown(
        subtotal=subtotal,
        shipping=shipping,
        discount_code_amount=discount_code_amount,
        points_discount=points_discount,
        total=total,
        points_redeemed=points_redeemed,
    )


def free_shipping_shortfall(subtotal: Cents, policy: CheckoutPolicy = DEFAULT_POLICY) -> Cents:
    """Cents still missing for free shipping, 0 once reached."""
    return max(0, policy.free_shipping_threshold - subtotal)


# ═══════════════════════════════════════════════════════════════════════════════
# Order Snapshot / Placement
# ═══════════════════════════════════════════════════════════════════════════════


def snapshot_order(
    items: Iterable[LineItem],
    breakdown: TotalBreakdown,
    policy: CheckoutPolicy = DEFAULT_POLICY,
    *,
    discount_code: str | None = None,
) -> OrderSnapshot:
    """Freeze cart lines and totals into the record returns are computed against."""
    lines = tuple(
        OrderLine(
            product_id=item.product_id,
            title=item.title,
            unit_price=item.unit_price,
            quantity=item.quantity,
            selection=dict(item.selection),
        )
        for item in items
    )
    return OrderSnapshot(
        lines=lines,
        subtotal=breakdown.subtotal,
        shipping=breakdown.shipping,
        discount_code_amount=breakdown.discount_code_amount,
        points_redeemed=breakdown.points_redeemed,
        points_discount=breakdown.points_discount,
        total=breakdown.total,
        points_earned=points_earned(breakdown.subtotal, policy.earn_rate),
        discount_code=discount_code,
    )


async def place_order(
    engine: CartEngine,
    breakdown: TotalBreakdown,
    sink: OrderSink,
    policy: CheckoutPolicy = DEFAULT_POLICY,
    *,
    discount_code: str | None = None,
) -> Result[str, CheckoutError]:
    """
    Persist the cart as an order and clear it.

    The cart is left untouched when persistence fails.

    Example:
        match await place_order(engine, breakdown, sink):
            case Ok(order_id):
                redirect(f"/orders/{order_id}")
            case Error(e):
                show(e.message)
    """
    if not engine.items:
        return Error(CheckoutError(CheckoutErrorKind.EMPTY_CART, "Cart is empty"))

    snapshot = snapshot_order(engine.items, breakdown, policy, discount_code=discount_code)
    result: Result[str, CheckoutError] = await L.catching_async(
        lambda: sink.save_order(snapshot),
        on_error=lambda e: CheckoutError(CheckoutErrorKind.PERSISTENCE, f"Failed to save order: {e}", e),
    )

    match result:
        case Ok(order_id):
            logger.info("Placed order %s from cart %s (total %d)", order_id, engine.cart_id, snapshot.total)
            await engine.clear()
        case Error(e):
            logger.error("Order placement for cart %s failed: %s", engine.cart_id, e.message)

    return result


__all__ = (
    "DEFAULT_POLICY",
    "compose_total",
    "free_shipping_shortfall",
    "snapshot_order",
    "place_order",
)
