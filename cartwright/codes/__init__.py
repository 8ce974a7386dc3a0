"""
Codes — percent / flat discount codes.

    from cartwright import codes as D

    result = D.apply_code(stored_code, subtotal=7000, now=datetime.now())
"""

from __future__ import annotations

from cartwright.codes._types import (
    CodeKind,
    DiscountCode,
    AppliedCode,
    CodeErrorKind,
    CodeError,
)
from cartwright.codes._apply import normalize_code, code_amount, apply_code

__all__ = (
    "CodeKind",
    "DiscountCode",
    "AppliedCode",
    "CodeErrorKind",
    "CodeError",
    "normalize_code",
    "code_amount",
    "apply_code",
)
