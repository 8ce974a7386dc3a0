"""
Core types for cartwright.

Re-exports from kungfu/combinators + money helpers.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from fractions import Fraction

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Cents = int
"""Money in minor currency units. Never a float."""

type Selection = Mapping[str, str]
"""Chosen option value per variation group name."""


def round_half_up(value: Fraction) -> int:
    """
    Round a fraction to the nearest integer, halves towards +infinity.

    Matches the storefront's historical rounding (0.5 → 1, -0.5 → 0),
    not Python's banker's rounding.
    """
    return math.floor(value + Fraction(1, 2))


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Money
    "Cents",
    "Selection",
    "round_half_up",
)
