"""
Return proration — spread order-level discounts back over returned units.

All figures come from the order snapshot; current catalog prices are never
consulted.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from fractions import Fraction

from kungfu import Result, Ok, Error

from cartwright._types import Cents, round_half_up
from cartwright.checkout import OrderSnapshot
from cartwright.loyalty import DEFAULT_EARN_RATE, points_to_credit, points_to_deduct
from cartwright.returns._types import (
    ReturnLine,
    DeductionMode,
    RefundPolicy,
    RefundLine,
    Refund,
    ReturnError,
    ReturnErrorKind,
)
from cartwright.returns._availability import returnable_quantities

DEFAULT_REFUND_POLICY = RefundPolicy()

# ═══════════════════════════════════════════════════════════════════════════════
# Line / Unit Deductions
# ═══════════════════════════════════════════════════════════════════════════════


def line_share(snapshot: OrderSnapshot, index: int) -> Fraction:
    """Line total over order subtotal, within [0, 1]; 0 for a zero subtotal."""
    if snapshot.subtotal <= 0:
        return Fraction(0)
    share = Fraction(snapshot.lines[index].line_total, snapshot.subtotal)
    return min(Fraction(1), max(Fraction(0), share))


def line_discount(snapshot: OrderSnapshot, index: int) -> Cents:
    """
    Code and points discounts attributable to one line.

    Each source is rounded separately, so summed over all lines the result
    may differ from the order's discounts by up to one cent per line.
    """
    share = line_share(snapshot, index)
    return (
        round_half_up(snapshot.discount_code_amount * share)
        + round_half_up(snapshot.points_discount * share)
    )


def unit_deductions(
    prorated: Cents,
    quantity: int,
    mode: DeductionMode = DeductionMode.CONSERVING,
) -> tuple[Cents, ...]:
    """
    Per-unit deductions for units 1..quantity of a line.

    Example:
        unit_deductions(1001, 2)                        # (500, 501)
        unit_deductions(1001, 2, DeductionMode.PER_UNIT)  # (501, 501)
    """
    if quantity <= 0:
        return ()

    match mode:
        case DeductionMode.CONSERVING:
            base = prorated // quantity
            return (base,) * (quantity - 1) + (prorated - base * (quantity - 1),)
        case DeductionMode.PER_UNIT:
            return (round_half_up(Fraction(prorated, quantity)),) * quantity


# ═══════════════════════════════════════════════════════════════════════════════
# compute_refund()
# ═══════════════════════════════════════════════════════════════════════════════


def compute_refund(
    snapshot: OrderSnapshot,
    request: Sequence[ReturnLine],
    *,
    returned: Mapping[int, int] | None = None,
    requested: Mapping[int, int] | None = None,
    policy: RefundPolicy = DEFAULT_REFUND_POLICY,
    earn_rate: Fraction = DEFAULT_EARN_RATE,
) -> Result[Refund, ReturnError]:
    """
    Compute the refund for a return request.

    Returned units continue the line's unit numbering after units already
    returned or requested, so under CONSERVING mode the remainder lands on
    whichever return covers the line's last unit.

    Args:
        snapshot: The placed order
        request: Lines and quantities being returned
        returned: Units already refunded, by line index
        requested: Units in other open return requests, by line index
        policy: How discounts are spread over units
        earn_rate: Points earning rate used to claw back earned points

    Example:
        match compute_refund(order, [ReturnLine(0, 1)]):
            case Ok(refund):
                pay_out(refund.total)
            case Error(e):
                reject(e.message)
    """
    if not request:
        return Error(ReturnError(ReturnErrorKind.EMPTY, "Nothing to return"))

    quantities: dict[int, int] = {}
    for line in request:
        if not 0 <= line.index < len(snapshot.lines):
            return Error(ReturnError(ReturnErrorKind.UNKNOWN_LINE, f"No order line {line.index}", line.index))
        if line.quantity <= 0:
            return Error(ReturnError(
                ReturnErrorKind.INVALID_QUANTITY,
                f"Return quantity must be positive, got {line.quantity}",
                line.index,
            ))
        quantities[line.index] = quantities.get(line.index, 0) + line.quantity

    available = returnable_quantities(snapshot, returned, requested)
    for index, quantity in quantities.items():
        if quantity > available[index]:
            return Error(ReturnError(
                ReturnErrorKind.EXCEEDS_RETURNABLE,
                f"Only {available[index]} of line {index} can be returned, got {quantity}",
                index,
            ))

    claimed = _merge(returned, requested)
    lines: list[RefundLine] = []
    for index, quantity in sorted(quantities.items()):
        order_line = snapshot.lines[index]
        prorated = line_discount(snapshot, index)
        units = unit_deductions(prorated, order_line.quantity, policy.mode)
        start = claimed.get(index, 0)
        deductions = units[start:start + quantity]
        lines.append(RefundLine(
            index=index,
            quantity=quantity,
            unit_price=order_line.unit_price,
            prorated_discount=prorated,
            deductions=deductions,
            amount=sum(max(0, order_line.unit_price - d) for d in deductions),
        ))

    items_total = sum(line.amount for line in lines)
    # Points were earned and redeemed on gross line value
    returned_value = sum(snapshot.lines[i].unit_price * q for i, q in quantities.items())
    shipping = snapshot.shipping if sum(quantities.values()) == snapshot.total_quantity else 0

    return Ok(Refund(
        lines=tuple(lines),
        items_total=items_total,
        shipping=shipping,
        total=items_total + shipping,
        points_to_credit=points_to_credit(snapshot.points_redeemed, returned_value, snapshot.subtotal),
        points_to_deduct=min(snapshot.points_earned, points_to_deduct(returned_value, earn_rate)),
    ))


def _merge(*counts: Mapping[int, int] | None) -> dict[int, int]:
    merged: dict[int, int] = {}
    for mapping in counts:
        for index, quantity in (mapping or {}).items():
            merged[index] = merged.get(index, 0) + quantity
    return merged


__all__ = (
    "DEFAULT_REFUND_POLICY",
    "line_share",
    "line_discount",
    "unit_deductions",
    "compute_refund",
)
