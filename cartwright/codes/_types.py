"""
Discount code types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto

from cartwright._types import Cents


class CodeKind(Enum):
    """PERCENT: value is a whole percentage. FLAT: value is cents."""

    PERCENT = auto()
    FLAT = auto()


@dataclass(frozen=True, slots=True)
class DiscountCode:
    """A redeemable code as configured by the shop admin."""

    code: str
    kind: CodeKind
    value: int
    active: bool = True
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    max_global_uses: int | None = None
    global_uses: int = 0
    one_time_use: bool = False


@dataclass(frozen=True, slots=True)
class AppliedCode:
    """Code accepted for an order, with the cents it takes off."""

    code: str
    amount: Cents


class CodeErrorKind(Enum):
    """Why a code was rejected."""

    UNKNOWN = auto()
    INACTIVE = auto()
    NOT_YET_VALID = auto()
    EXPIRED = auto()
    EXHAUSTED = auto()
    ALREADY_USED = auto()


@dataclass(frozen=True, slots=True)
class CodeError:
    """Code rejection."""

    kind: CodeErrorKind
    message: str


__all__ = (
    "CodeKind",
    "DiscountCode",
    "AppliedCode",
    "CodeErrorKind",
    "CodeError",
)
