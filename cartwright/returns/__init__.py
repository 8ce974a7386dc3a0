"""
Returns — refund computation against a placed order.

    from cartwright import returns as R

    left = R.returnable_quantities(order, returned={0: 1})

    match R.compute_refund(order, [R.ReturnLine(index=0, quantity=1)]):
        case Ok(refund): ...
        case Error(e): ...
"""

from __future__ import annotations

from cartwright.returns._types import (
    ReturnLine,
    DeductionMode,
    RefundPolicy,
    RefundLine,
    Refund,
    ReturnErrorKind,
    ReturnError,
)
from cartwright.returns._availability import returnable_quantities
from cartwright.returns._prorate import (
    DEFAULT_REFUND_POLICY,
    line_share,
    line_discount,
    unit_deductions,
    compute_refund,
)

__all__ = (
    # Types
    "ReturnLine",
    "DeductionMode",
    "RefundPolicy",
    "RefundLine",
    "Refund",
    "ReturnErrorKind",
    "ReturnError",
    # Availability
    "returnable_quantities",
    # Proration
    "DEFAULT_REFUND_POLICY",
    "line_share",
    "line_discount",
    "unit_deductions",
    "compute_refund",
)
