"""
Checkout preview — revalidation, balance and totals as a dependency graph.

    RequestNode ──┬── ValidatedCartNode ──┐
                  └── BalanceNode ────────┴── PreviewNode

Cart revalidation and the loyalty balance fetch have no dependency on each
other and run concurrently; totals wait for both.

Example:
    preview = await preview(CheckoutRequest(engine, balance, redeemed_points=3000))
    preview.breakdown.total
"""

import logging
from dataclasses import dataclass, field
from typing import Any, cast

from kungfu import Result, Ok, Error
from combinators import lift as L
from nodnod import scalar_node, EventLoopAgent, Scope, Value, Node

from cartwright._types import Cents
from cartwright.cart import CartEngine, LineItem, RevalidationReport, RevalidationStatus
from cartwright.loyalty import LoyaltyBalance, TierHint, remaining_points_hint
from cartwright.checkout._policy import CheckoutPolicy
from cartwright.checkout._types import TotalBreakdown
from cartwright.checkout._compose import compose_total, free_shipping_shortfall

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Input / Output
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutRequest:
    """What the checkout page asks for."""

    engine: CartEngine
    balance: LoyaltyBalance | None = None
    policy: CheckoutPolicy = field(default_factory=CheckoutPolicy)
    discount_code_amount: Cents = 0
    redeemed_points: int = 0


@dataclass(frozen=True, slots=True)
class CheckoutPreview:
    items: tuple[LineItem, ...]
    report: RevalidationReport
    available_points: int
    breakdown: TotalBreakdown
    hint: TierHint | None
    free_shipping_shortfall: Cents


# ═══════════════════════════════════════════════════════════════════════════════
# Nodes
# ═══════════════════════════════════════════════════════════════════════════════


@scalar_node
class RequestNode:
    """Entry point: wraps the CheckoutRequest input."""

    def __init__(self, data: CheckoutRequest) -> None:
        self.data = data

    @classmethod
    def __compose__(cls, request: CheckoutRequest) -> "RequestNode":
        return cls(request)


@scalar_node
class ValidatedCartNode:
    """Cart lines after the newest revalidation pass against the catalog."""

    def __init__(self, items: tuple[LineItem, ...], report: RevalidationReport) -> None:
        self.items = items
        self.report = report

    @classmethod
    async def __compose__(cls, request: RequestNode) -> "ValidatedCartNode":
        engine = request.data.engine
        report = await engine.revalidate()
        if report.status == RevalidationStatus.SUPERSEDED:
            report = await engine.settled() or report
        return cls(engine.items, report)


@scalar_node
class BalanceNode:
    """Spendable loyalty points; 0 for guests or when the provider fails."""

    def __init__(self, points: int) -> None:
        self.points = points

    @classmethod
    async def __compose__(cls, request: RequestNode) -> "BalanceNode":
        balance = request.data.balance
        if balance is None:
            return cls(0)

        result: Result[int, str] = await L.catching_async(
            balance.available_points,
            on_error=str,
        )
        match result:
            case Ok(points):
                return cls(points)
            case Error(message):
                logger.warning("Loyalty balance unavailable: %s", message)
                return cls(0)


@scalar_node
class PreviewNode:
    """Totals over the validated cart."""

    def __init__(self, data: CheckoutPreview) -> None:
        self.data = data

    @classmethod
    async def __compose__(
        cls,
        request: RequestNode,
        cart: ValidatedCartNode,
        balance: BalanceNode,
    ) -> "PreviewNode":
        req = request.data
        breakdown = compose_total(
            cart.items,
            req.policy,
            discount_code_amount=req.discount_code_amount,
            redeemed_points=req.redeemed_points,
            available_points=balance.points,
        )
        return cls(CheckoutPreview(
            items=cart.items,
            report=cart.report,
            available_points=balance.points,
            breakdown=breakdown,
            hint=remaining_points_hint(
                balance.points,
                breakdown.subtotal + breakdown.shipping,
                req.policy.tiers,
            ),
            free_shipping_shortfall=free_shipping_shortfall(breakdown.subtotal, req.policy),
        ))


# ═══════════════════════════════════════════════════════════════════════════════
# preview()
# ═══════════════════════════════════════════════════════════════════════════════


async def preview(request: CheckoutRequest) -> CheckoutPreview:
    """Run the checkout graph for one request."""
    agent = EventLoopAgent.build({cast(type[Node[Any, Any]], PreviewNode)})

    async with Scope(detail="checkout") as scope:
        scope.push(Value(CheckoutRequest, request))
        await agent.run(scope, {})
        node = cast(PreviewNode, scope.get(PreviewNode).value)

    return node.data


__all__ = (
    "CheckoutRequest",
    "CheckoutPreview",
    "RequestNode",
    "ValidatedCartNode",
    "BalanceNode",
    "PreviewNode",
    "preview",
)
