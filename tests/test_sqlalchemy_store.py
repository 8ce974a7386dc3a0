"""Tests for the SQLAlchemy cart store (aiosqlite)."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from cartwright.cart import (
    CartEngine,
    LineItem,
    MemoryLookup,
    SQLAlchemyCartStore,
    create_database,
)
from tests.helpers import ok


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> AsyncIterator[SQLAlchemyCartStore]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'carts.db'}")
    session_factory = await create_database(engine)
    yield SQLAlchemyCartStore(session_factory)
    await engine.dispose()


ITEMS = (
    LineItem("tee", "Club Tee", 2200, 2, {"Size": "M", "Color": "Red"}, stock_ceiling=3, images=("tee.jpg",)),
    LineItem("darts", "Dart Set", 10000, 1),
)


class TestSQLAlchemyCartStore:
    @pytest.mark.asyncio
    async def test_unknown_cart_is_empty(self, store: SQLAlchemyCartStore):
        assert ok(await store.load("nobody")) == ()

    @pytest.mark.asyncio
    async def test_save_then_load(self, store: SQLAlchemyCartStore):
        ok(await store.save("c1", ITEMS))

        assert ok(await store.load("c1")) == ITEMS

    @pytest.mark.asyncio
    async def test_save_replaces_whole_cart(self, store: SQLAlchemyCartStore):
        ok(await store.save("c1", ITEMS))
        ok(await store.save("c1", ITEMS[1:]))

        assert ok(await store.load("c1")) == ITEMS[1:]

    @pytest.mark.asyncio
    async def test_subscribers_hear_other_origins_only(self, store: SQLAlchemyCartStore):
        me, other = object(), object()
        heard: list[int] = []
        store.subscribe("c1", lambda items: heard.append(len(items)), origin=me)

        ok(await store.save("c1", ITEMS, origin=me))
        ok(await store.save("c1", ITEMS[1:], origin=other))

        assert heard == [1]

    @pytest.mark.asyncio
    async def test_engines_share_cart(self, store: SQLAlchemyCartStore):
        lookup = MemoryLookup()
        a = CartEngine(store, lookup, cart_id="c1")
        await a.add(ITEMS[0])

        b = CartEngine(store, lookup, cart_id="c1")
        await b.load()

        assert b.items == a.items
