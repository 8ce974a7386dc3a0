"""
SQLAlchemy integration — persisted cart store.

One row per cart id; the whole line-item collection is stored as a JSON
payload and replaced in a single transaction, so readers never see a
partial cart.

Usage:
    engine = create_async_engine("sqlite+aiosqlite:///carts.db")
    session_factory = await create_database(engine)

    store = SQLAlchemyCartStore(session_factory)
    cart = CartEngine(store, lookup, cart_id="user-42")
"""

import json
from datetime import datetime

from sqlalchemy import select, String, DateTime, Text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from cartwright.cart._types import LineItem
from cartwright.cart._store import Channel, Items, Listener, StoreError, Unsubscribe


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class CartTable(Base):
    __tablename__ = "carts"

    cart_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


async def create_database(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create tables and return a session factory."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return async_sessionmaker(engine, expire_on_commit=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyCartStore:
    """
    Cart store backed by any SQLAlchemy async engine.

    Change notification is in-process only: engines sharing this store
    instance hear each other's saves.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._channel = Channel()

    async def load(self, cart_id: str) -> Result[Items, StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = select(CartTable).where(CartTable.cart_id == cart_id)
                result = await session.execute(stmt)
                row = result.scalar_one_or_none()

                if row is None:
                    return Ok(())

                return Ok(tuple(LineItem.from_dict(d) for d in json.loads(row.payload)))

        except Exception as e:
            return Error(StoreError(f"Failed to load cart {cart_id}: {e}", e))

    async def save(
        self,
        cart_id: str,
        items: Items,
        origin: object | None = None,
    ) -> Result[None, StoreError]:
        items = tuple(items)
        try:
            async with self._session_factory() as session:
                payload = json.dumps([item.to_dict() for item in items])
                row = await session.get(CartTable, cart_id)
                if row is None:
                    session.add(CartTable(cart_id=cart_id, payload=payload, updated_at=datetime.now()))
                else:
                    row.payload = payload
                    row.updated_at = datetime.now()
                await session.commit()

        except Exception as e:
            return Error(StoreError(f"Failed to save cart {cart_id}: {e}", e))

        self._channel.publish(cart_id, items, origin)
        return Ok(None)

    def subscribe(
        self,
        cart_id: str,
        listener: Listener,
        origin: object | None = None,
    ) -> Unsubscribe:
        return self._channel.subscribe(cart_id, listener, origin)


__all__ = (
    "Base",
    "CartTable",
    "create_database",
    "SQLAlchemyCartStore",
)
