"""Tests for total composition, order placement and the preview graph."""

import asyncio
from collections.abc import Sequence
from fractions import Fraction

import pytest

from cartwright.catalog import SimpleProduct, VariedProduct
from cartwright.cart import (
    CartEngine,
    LineItem,
    LookupEntry,
    MemoryCartStore,
    MemoryLookup,
    RevalidationStatus,
)
from cartwright.loyalty import DiscountTier
from cartwright.checkout import (
    CheckoutPolicy,
    CheckoutErrorKind,
    CheckoutRequest,
    MemoryOrderSink,
    OrderSnapshot,
    compose_total,
    free_shipping_shortfall,
    snapshot_order,
    place_order,
    preview,
)
from tests.helpers import ok, err


class StaticBalance:
    def __init__(self, points: int) -> None:
        self.points = points

    async def available_points(self) -> int:
        return self.points


class BrokenBalance:
    async def available_points(self) -> int:
        raise ConnectionError("loyalty service down")


class BrokenSink:
    async def save_order(self, snapshot: OrderSnapshot) -> str:
        raise RuntimeError("database unavailable")


class GatedLookup(MemoryLookup):
    """Signals when a lookup starts, then holds it until the gate opens."""

    def __init__(self, products: Sequence[SimpleProduct | VariedProduct] = ()) -> None:
        super().__init__(products)
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()

    async def batch_get(self, identifiers: Sequence[str]) -> list[LookupEntry]:
        self.entered.set()
        await self.gate.wait()
        return await super().batch_get(identifiers)


def line(unit_price: int, quantity: int, product_id: str = "p") -> LineItem:
    return LineItem(product_id, product_id.title(), unit_price, quantity)


class TestComposeTotal:
    """Subtotal, shipping, discounts."""

    def test_free_shipping_over_threshold(self):
        breakdown = compose_total([line(10000, 3)])

        assert breakdown.subtotal == 30000
        assert breakdown.shipping == 0
        assert breakdown.total == 30000

    def test_shipping_below_threshold(self):
        breakdown = compose_total([line(3500, 2)])

        assert breakdown.subtotal == 7000
        assert breakdown.shipping == 495
        assert breakdown.total == 7495

    def test_threshold_is_inclusive(self):
        assert compose_total([line(8000, 1)]).shipping == 0

    def test_discount_code_subtracted(self):
        breakdown = compose_total([line(10000, 1)], discount_code_amount=1500)

        assert breakdown.discount_code_amount == 1500
        assert breakdown.total == 8500

    def test_points_need_opt_in(self):
        breakdown = compose_total([line(10000, 1)], available_points=5000)

        assert breakdown.points_discount == 0
        assert breakdown.points_redeemed == 0

    def test_points_redeemed_at_best_tier(self):
        breakdown = compose_total([line(2005, 1)], redeemed_points=3000, available_points=3000)

        # 2005 + 495 shipping = 2500 carries the 3000-point tier
        assert breakdown.points_discount == 2000
        assert breakdown.points_redeemed == 3000
        assert breakdown.total == 500

    def test_redemption_limited_by_balance(self):
        breakdown = compose_total([line(10000, 1)], redeemed_points=5000, available_points=2500)

        assert breakdown.points_redeemed == 2000
        assert breakdown.points_discount == 1000

    def test_total_never_negative(self):
        breakdown = compose_total(
            [line(1000, 1)],
            discount_code_amount=999,
            redeemed_points=1000,
            available_points=1000,
        )

        assert breakdown.total == max(0, 1000 + 495 - 999 - 500)
        assert breakdown.total >= 0

    def test_custom_policy(self):
        policy = (
            CheckoutPolicy()
            .with_shipping(threshold=5000, fee=690)
            .with_tiers(DiscountTier(100, 50))
        )

        breakdown = compose_total([line(4000, 1)], policy, redeemed_points=100, available_points=100)

        assert breakdown.shipping == 690
        assert breakdown.points_discount == 50

    def test_empty_cart(self):
        breakdown = compose_total([])

        assert breakdown.subtotal == 0
        assert breakdown.shipping == 495


class TestPolicy:
    def test_from_env(self):
        policy = CheckoutPolicy.from_env({
            "CARTWRIGHT_FREE_SHIPPING_THRESHOLD": "10000",
            "CARTWRIGHT_SHIPPING_FEE": "590",
            "CARTWRIGHT_POINTS_EARN_RATE": "5/100",
        })

        assert policy.free_shipping_threshold == 10000
        assert policy.shipping_fee == 590
        assert policy.earn_rate == Fraction(1, 20)

    def test_from_env_defaults(self):
        assert CheckoutPolicy.from_env({}) == CheckoutPolicy()

    def test_from_env_rejects_garbage(self):
        with pytest.raises(ValueError):
            CheckoutPolicy.from_env({"CARTWRIGHT_SHIPPING_FEE": "free"})

    def test_shortfall(self):
        assert free_shipping_shortfall(7000) == 1000
        assert free_shipping_shortfall(9000) == 0


class TestOrders:
    """Snapshot and placement."""

    def test_snapshot_freezes_lines_and_totals(self):
        items = [LineItem("tee", "Club Tee", 2200, 2, {"Size": "M"}), line(1000, 1)]
        breakdown = compose_total(items, discount_code_amount=500)

        snapshot = snapshot_order(items, breakdown, discount_code="SPRING10")

        assert [(o.product_id, o.unit_price, o.quantity) for o in snapshot.lines] == [
            ("tee", 2200, 2),
            ("p", 1000, 1),
        ]
        assert snapshot.lines[0].selection == {"Size": "M"}
        assert snapshot.subtotal == 5400
        assert snapshot.total == breakdown.total
        assert snapshot.points_earned == 189
        assert snapshot.discount_code == "SPRING10"
        assert snapshot.total_quantity == 3

    @pytest.mark.asyncio
    async def test_place_order_persists_and_clears(self):
        engine = CartEngine(MemoryCartStore(), MemoryLookup())
        await engine.add(line(10000, 1))
        sink = MemoryOrderSink()

        order_id = ok(await place_order(engine, compose_total(engine.items), sink))

        assert sink.orders[order_id].subtotal == 10000
        assert engine.items == ()

    @pytest.mark.asyncio
    async def test_failed_persistence_keeps_cart(self):
        engine = CartEngine(MemoryCartStore(), MemoryLookup())
        await engine.add(line(10000, 1))

        error = err(await place_order(engine, compose_total(engine.items), BrokenSink()))

        assert error.kind == CheckoutErrorKind.PERSISTENCE
        assert len(engine.items) == 1

    @pytest.mark.asyncio
    async def test_empty_cart_rejected(self):
        engine = CartEngine(MemoryCartStore(), MemoryLookup())

        error = err(await place_order(engine, compose_total([]), MemoryOrderSink()))

        assert error.kind == CheckoutErrorKind.EMPTY_CART


class TestPreview:
    """Checkout graph."""

    @pytest.mark.asyncio
    async def test_preview_revalidates_and_totals(self, darts: SimpleProduct, tee: VariedProduct):
        engine = CartEngine(MemoryCartStore(), MemoryLookup([darts, tee]))
        await engine.add(LineItem("tee", "Club Tee", 1800, 5, {"Size": "M", "Color": "Red"}))

        view = await preview(CheckoutRequest(engine, StaticBalance(5000), redeemed_points=5000))

        assert view.report.status == RevalidationStatus.APPLIED
        assert view.items[0].quantity == 3
        assert view.items[0].unit_price == 2200
        assert view.breakdown.subtotal == 6600
        assert view.breakdown.shipping == 495
        assert view.breakdown.points_discount == 5000
        assert view.breakdown.total == 6600 + 495 - 5000
        assert view.available_points == 5000
        assert view.hint is None
        assert view.free_shipping_shortfall == 1400

    @pytest.mark.asyncio
    async def test_preview_without_balance(self, darts: SimpleProduct):
        engine = CartEngine(MemoryCartStore(), MemoryLookup([darts]))
        await engine.add(LineItem("darts", "Dart Set", 10000, 1))

        view = await preview(CheckoutRequest(engine, redeemed_points=1000))

        assert view.available_points == 0
        assert view.breakdown.points_discount == 0
        assert view.breakdown.total == 10000

    @pytest.mark.asyncio
    async def test_balance_failure_falls_back_to_zero(self, darts: SimpleProduct):
        engine = CartEngine(MemoryCartStore(), MemoryLookup([darts]))
        await engine.add(LineItem("darts", "Dart Set", 10000, 1))

        view = await preview(CheckoutRequest(engine, BrokenBalance(), redeemed_points=1000))

        assert view.available_points == 0
        assert view.breakdown.total == 10000

    @pytest.mark.asyncio
    async def test_hint_when_order_too_small_for_points(self, chalk: SimpleProduct):
        engine = CartEngine(MemoryCartStore(), MemoryLookup([chalk]))
        await engine.add(LineItem("chalk", "Chalk", 300, 1))

        view = await preview(CheckoutRequest(engine, StaticBalance(5000), redeemed_points=5000))

        assert view.breakdown.points_discount == 500
        assert view.breakdown.total == 300 + 495 - 500
        assert view.hint is not None
        assert view.hint.tier.points == 5000
        assert view.hint.shortfall == 5000 - 794

    @pytest.mark.asyncio
    async def test_superseded_revalidation_waits_for_newest(self, darts: SimpleProduct):
        lookup = GatedLookup([darts])
        engine = CartEngine(MemoryCartStore(), lookup)
        await engine.add(LineItem("darts", "Dart Set", 9000, 1))

        running = asyncio.create_task(preview(CheckoutRequest(engine)))
        await lookup.entered.wait()
        newer = asyncio.create_task(engine.revalidate())
        await asyncio.sleep(0)
        lookup.gate.set()

        view = await running
        await newer

        assert view.report.status == RevalidationStatus.APPLIED
        assert view.items[0].unit_price == 10000
        assert view.breakdown.subtotal == 10000
