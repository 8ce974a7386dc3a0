"""
Discount code validation and amount computation.
"""

from __future__ import annotations

from datetime import datetime

from kungfu import Result, Ok, Error

from cartwright._types import Cents
from cartwright.codes._types import (
    CodeKind,
    DiscountCode,
    AppliedCode,
    CodeError,
    CodeErrorKind,
)


def normalize_code(raw: str) -> str:
    """Codes are matched case-insensitively, ignoring surrounding whitespace."""
    return raw.strip().upper()


def code_amount(code: DiscountCode, subtotal: Cents) -> Cents:
    """
    Cents taken off by a code, capped so at least one cent stays payable.
    """
    match code.kind:
        case CodeKind.PERCENT:
            amount = subtotal * code.value // 100
        case CodeKind.FLAT:
            amount = code.value
    return min(amount, max(0, subtotal - 1))


def apply_code(
    code: DiscountCode | None,
    subtotal: Cents,
    *,
    now: datetime,
    already_used: bool = False,
) -> Result[AppliedCode, CodeError]:
    """
    Validate a looked-up code against its rules and compute its amount.

    Args:
        code: The stored code, or None when the lookup found nothing
        subtotal: Cart subtotal in cents (before shipping)
        now: Reference time for the validity window
        already_used: Whether this user has an order with this code

    Example:
        match apply_code(stored, subtotal=7000, now=datetime.now()):
            case Ok(applied):
                discount = applied.amount
            case Error(e):
                print(e.message)
    """
    if code is None:
        return Error(CodeError(CodeErrorKind.UNKNOWN, "Unknown discount code"))
    if not code.active:
        return Error(CodeError(CodeErrorKind.INACTIVE, f"{code.code} is deactivated"))
    if code.starts_at is not None and now < code.starts_at:
        return Error(CodeError(CodeErrorKind.NOT_YET_VALID, f"{code.code} is not valid yet"))
    if code.ends_at is not None and now > code.ends_at:
        return Error(CodeError(CodeErrorKind.EXPIRED, f"{code.code} has expired"))
    if code.max_global_uses is not None and code.global_uses >= code.max_global_uses:
        return Error(CodeError(CodeErrorKind.EXHAUSTED, f"{code.code} reached its usage limit"))
    if code.one_time_use and already_used:
        return Error(CodeError(CodeErrorKind.ALREADY_USED, f"{code.code} was already used"))

    return Ok(AppliedCode(code=code.code, amount=code_amount(code, subtotal)))


__all__ = ("normalize_code", "code_amount", "apply_code")
