"""
Cart engine — one shopper's cart, persisted write-through.

    engine = CartEngine(store, lookup, cart_id="user-42")
    await engine.load()
    await engine.add(LineItem("tee", "Tee", 1500, 2, {"Size": "M"}, stock_ceiling=5))
    report = await engine.revalidate()

Every mutation replaces the whole item tuple, notifies local subscribers and
saves to the store. Saves made by another engine on the same cart id replace
this engine's items wholesale (last writer wins).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from kungfu import Result, Ok, Error
from combinators import lift as L

from cartwright._types import Cents, Selection
from cartwright.catalog import (
    Product,
    StockLevel,
    Limited,
    OutOfStock,
    stock_level,
    unit_price,
)
from cartwright.cart._types import (
    LineKey,
    LineItem,
    clamp_quantity,
    RemovalReason,
    Removal,
    Clamp,
    Reprice,
    RevalidationStatus,
    RevalidationReport,
)
from cartwright.cart._lookup import LookupEntry, LookupFailure, ProductLookup
from cartwright.cart._store import CartStore, Channel, Items, Listener, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Refresh:
    """Fresh catalog facts for one line, applied at commit time."""

    title: str
    unit_price: Cents
    level: StockLevel
    images: tuple[str, ...]


class CartEngine:
    """
    Cart state for one session.

    Args:
        store: Where the cart is persisted and shared
        lookup: Catalog used by revalidate()
        cart_id: Persisted cart identity
    """

    def __init__(
        self,
        store: CartStore,
        lookup: ProductLookup,
        cart_id: str = "default",
    ) -> None:
        self.cart_id = cart_id
        self._store = store
        self._lookup = lookup
        self._items: Items = ()
        self._channel = Channel()
        self._generation = 0
        self._inflight: asyncio.Future[RevalidationReport] | None = None
        self._saves: set[asyncio.Future[None]] = set()
        self._unsubscribe = store.subscribe(cart_id, self._on_external_save, origin=self)

    @property
    def items(self) -> Items:
        return self._items

    @property
    def subtotal(self) -> Cents:
        return sum(item.line_total for item in self._items)

    # ═══════════════════════════════════════════════════════════════════════════
    # Subscriptions
    # ═══════════════════════════════════════════════════════════════════════════

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Called with the new items after every change, local or external."""
        return self._channel.subscribe(self.cart_id, listener)

    def close(self) -> None:
        """Detach from the store and cancel any running revalidation."""
        self._unsubscribe()
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

    def _on_external_save(self, items: Items) -> None:
        logger.debug("Cart %s replaced by another holder (%d items)", self.cart_id, len(items))
        self._items = tuple(items)
        self._channel.publish(self.cart_id, self._items, None)

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════════

    async def load(self) -> Items:
        """Replace in-memory items with the persisted cart."""
        match await self._store.load(self.cart_id):
            case Ok(items):
                self._items = tuple(items)
                self._channel.publish(self.cart_id, self._items, None)
            case Error(e):
                logger.error("Failed to load cart %s: %s", self.cart_id, e.message)
        return self._items

    async def add(self, item: LineItem) -> None:
        """
        Add an item, merging with an existing line of the same identity.

        Raises:
            ValueError: quantity is not positive
        """
        if item.quantity <= 0:
            raise ValueError(f"quantity must be positive, got {item.quantity}")

        key = item.key
        items: list[LineItem] = []
        merged = False
        for existing in self._items:
            if existing.key == key:
                total = clamp_quantity(existing.quantity + item.quantity, existing.stock_ceiling)
                items.append(existing.with_quantity(total))
                merged = True
            else:
                items.append(existing)

        if not merged:
            items.append(item.with_quantity(clamp_quantity(item.quantity, item.stock_ceiling)))

        await self._commit(tuple(items))

    async def remove(self, product_id: str, selection: Selection | None = None) -> None:
        """Remove one line (selection given) or every line of a product."""
        if selection is None:
            keep = tuple(i for i in self._items if i.product_id != product_id)
        else:
            key = LineKey.of(product_id, selection)
            keep = tuple(i for i in self._items if i.key != key)
        await self._commit(keep)

    async def update_quantity(
        self,
        product_id: str,
        selection: Selection | None,
        quantity: int,
    ) -> None:
        """Set a line's quantity; zero or less behaves as remove(product_id, selection)."""
        if quantity <= 0:
            await self.remove(product_id, selection)
            return

        key = LineKey.of(product_id, selection)
        await self._commit(tuple(
            i.with_quantity(clamp_quantity(quantity, i.stock_ceiling)) if i.key == key else i
            for i in self._items
        ))

    async def clear(self) -> None:
        await self._commit(())

    async def _commit(self, items: Items) -> None:
        self._items = items
        self._channel.publish(self.cart_id, items, None)
        # A cancelled caller must not leave the store behind self._items
        save = asyncio.ensure_future(self._save(items))
        self._saves.add(save)
        save.add_done_callback(self._saves.discard)
        await asyncio.shield(save)

    async def _save(self, items: Items) -> None:
        match await self._store.save(self.cart_id, items, origin=self):
            case Ok(_):
                pass
            case Error(e):
                logger.error("Failed to save cart %s: %s", self.cart_id, e.message)

    # ═══════════════════════════════════════════════════════════════════════════
    # Revalidation
    # ═══════════════════════════════════════════════════════════════════════════

    async def revalidate(self) -> RevalidationReport:
        """
        Bring every line in line with the current catalog.

        A later call supersedes and cancels one still running; the superseded
        call returns a SUPERSEDED report. A run cancelled before its commit
        changes nothing; one cancelled during its commit still finishes the
        save. A failed lookup leaves the cart as it was and returns FAILED.
        """
        self._generation += 1
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()

        task = asyncio.ensure_future(self._revalidate(self._generation))
        self._inflight = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return RevalidationReport(RevalidationStatus.SUPERSEDED)

    async def settled(self) -> RevalidationReport | None:
        """
        Report of the newest revalidation, waiting for it while it runs.

        Follows supersession to whichever run finishes last. None when no
        revalidation has run or the newest one was cancelled by close().
        """
        while (task := self._inflight) is not None:
            try:
                report = await asyncio.shield(task)
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
                if task is self._inflight:
                    return None
                continue
            if task is self._inflight:
                return report
        return None

    async def _revalidate(self, generation: int) -> RevalidationReport:
        snapshot = self._items
        if not snapshot:
            return RevalidationReport(RevalidationStatus.APPLIED)

        identifiers = list(dict.fromkeys(item.product_id for item in snapshot))
        result: Result[list[LookupEntry], LookupFailure] = await L.catching_async(
            lambda: self._lookup.batch_get(identifiers),
            on_error=lambda e: LookupFailure(str(e), e),
        )

        if generation != self._generation:
            return RevalidationReport(RevalidationStatus.SUPERSEDED)

        match result:
            case Error(failure):
                logger.warning("Revalidation of cart %s failed: %s", self.cart_id, failure.message)
                return RevalidationReport(RevalidationStatus.FAILED)
            case Ok(entries):
                pass

        refresh, missing = _plan(snapshot, entries)
        return await self._apply(refresh, missing)

    async def _apply(
        self,
        refresh: dict[LineKey, _Refresh],
        missing: set[LineKey],
    ) -> RevalidationReport:
        removed: list[Removal] = []
        clamped: list[Clamp] = []
        repriced: list[Reprice] = []
        items: list[LineItem] = []

        # Applied to the items as they are now; lines added meanwhile survive
        for item in self._items:
            key = item.key
            if key in missing:
                removed.append(Removal(key, RemovalReason.PRODUCT_MISSING))
                continue
            fresh = refresh.get(key)
            if fresh is None:
                items.append(item)
                continue

            quantity, ceiling = item.quantity, 0
            match fresh.level:
                case OutOfStock():
                    removed.append(Removal(key, RemovalReason.OUT_OF_STOCK))
                    continue
                case Limited(available):
                    ceiling = available
                    if item.quantity > available:
                        quantity = available
                        clamped.append(Clamp(key, item.quantity, available))
                case _:
                    pass

            if fresh.unit_price != item.unit_price:
                repriced.append(Reprice(key, item.unit_price, fresh.unit_price))

            items.append(replace(
                item,
                title=fresh.title,
                unit_price=fresh.unit_price,
                quantity=quantity,
                stock_ceiling=ceiling,
                images=fresh.images or item.images,
            ))

        for r in removed:
            logger.info("Removed %s from cart %s (%s)", r.key.product_id, self.cart_id, r.reason.name)
        for c in clamped:
            logger.info(
                "Clamped %s in cart %s from %d to %d",
                c.key.product_id, self.cart_id, c.requested, c.available,
            )

        updated = tuple(items)
        if updated != self._items:
            await self._commit(updated)

        return RevalidationReport(
            RevalidationStatus.APPLIED,
            removed=tuple(removed),
            clamped=tuple(clamped),
            repriced=tuple(repriced),
        )


def _plan(
    snapshot: Sequence[LineItem],
    entries: Sequence[LookupEntry],
) -> tuple[dict[LineKey, _Refresh], set[LineKey]]:
    """Split lines into refreshable and vanished. Lines without an entry are untouched."""
    by_id = {entry.identifier: entry for entry in entries}
    refresh: dict[LineKey, _Refresh] = {}
    missing: set[LineKey] = set()

    for item in snapshot:
        entry = by_id.get(item.product_id)
        if entry is None:
            continue
        if not entry.exists or entry.product is None:
            missing.add(item.key)
            continue
        refresh[item.key] = _refresh(entry.product, item.selection)

    return refresh, missing


def _refresh(product: Product, selection: Selection) -> _Refresh:
    return _Refresh(
        title=product.title,
        unit_price=unit_price(product, selection),
        level=stock_level(product, selection),
        images=product.images,
    )


__all__ = ("CartEngine",)
