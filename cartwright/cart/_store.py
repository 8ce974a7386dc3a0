"""
Cart store — durable, shared storage of whole line-item collections.

Every save replaces the collection for a cart id atomically; readers never
observe a half-written cart. Other holders of the same cart are notified of
each save (the cross-tab storage event).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from kungfu import Result, Ok

from cartwright.cart._types import LineItem

logger = logging.getLogger(__name__)

type Items = tuple[LineItem, ...]
type Listener = Callable[[Items], None]
type Unsubscribe = Callable[[], None]

# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class StoreError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(Protocol):
    """
    Persisted cart storage with change notification.

    `origin` identifies the writer; a subscriber registered with the same
    origin does not hear about its own saves.
    """

    async def load(self, cart_id: str) -> Result[Items, StoreError]:
        """Stored items, or an empty tuple for an unknown cart."""
        ...

    async def save(
        self,
        cart_id: str,
        items: Items,
        origin: object | None = None,
    ) -> Result[None, StoreError]:
        """Replace the whole collection, then notify other subscribers."""
        ...

    def subscribe(
        self,
        cart_id: str,
        listener: Listener,
        origin: object | None = None,
    ) -> Unsubscribe:
        """Register for saves made by other origins."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Channel — In-Process Fan-Out
# ═══════════════════════════════════════════════════════════════════════════════


class Channel:
    """Per-cart subscriber registry shared by store implementations."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[tuple[object | None, Listener]]] = {}

    def subscribe(
        self,
        cart_id: str,
        listener: Listener,
        origin: object | None = None,
    ) -> Unsubscribe:
        entry = (origin, listener)
        self._subscribers.setdefault(cart_id, []).append(entry)

        def unsubscribe() -> None:
            subs = self._subscribers.get(cart_id, [])
            if entry in subs:
                subs.remove(entry)

        return unsubscribe

    def publish(self, cart_id: str, items: Items, origin: object | None) -> None:
        for sub_origin, listener in list(self._subscribers.get(cart_id, [])):
            if origin is not None and sub_origin is origin:
                continue
            try:
                listener(items)
            except Exception:
                # Listener errors never reach the writer
                logger.exception("Cart listener failed for cart %s", cart_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing / Single Process
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryCartStore:
    """
    In-memory cart store.

    Note: single process only; contents do not survive a restart.
    """

    def __init__(self) -> None:
        self._carts: dict[str, Items] = {}
        self._lock = asyncio.Lock()
        self._channel = Channel()

    async def load(self, cart_id: str) -> Result[Items, StoreError]:
        async with self._lock:
            return Ok(self._carts.get(cart_id, ()))

    async def save(
        self,
        cart_id: str,
        items: Items,
        origin: object | None = None,
    ) -> Result[None, StoreError]:
        async with self._lock:
            self._carts[cart_id] = tuple(items)
        self._channel.publish(cart_id, tuple(items), origin)
        return Ok(None)

    def subscribe(
        self,
        cart_id: str,
        listener: Listener,
        origin: object | None = None,
    ) -> Unsubscribe:
        return self._channel.subscribe(cart_id, listener, origin)


__all__ = (
    "Items",
    "Listener",
    "Unsubscribe",
    "StoreError",
    "CartStore",
    "Channel",
    "MemoryCartStore",
)
