"""
Product lookup — the catalog collaborator used by revalidation.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from cartwright.catalog import Product

# ═══════════════════════════════════════════════════════════════════════════════
# Lookup Entry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LookupEntry:
    """Current truth for one requested identifier."""

    identifier: str
    exists: bool
    product: Product | None


@dataclass(frozen=True, slots=True)
class LookupFailure:
    """Lookup call failed (network, backend, malformed data)."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Lookup Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class ProductLookup(Protocol):
    """
    Batched product lookup by slug or id.

    Implementations may raise; revalidation catches and logs.

    Example — HTTP implementation:

        class ApiLookup:
            def __init__(self, client: httpx.AsyncClient):
                self.client = client

            async def batch_get(self, identifiers: Sequence[str]) -> list[LookupEntry]:
                resp = await self.client.post("/api/shop/validate-products", json={"slugs": list(identifiers)})
                resp.raise_for_status()
                return [
                    LookupEntry(r["slug"], r["exists"], parse_product(r["product"]) if r["product"] else None)
                    for r in resp.json()["results"]
                ]
    """

    async def batch_get(self, identifiers: Sequence[str]) -> list[LookupEntry]:
        """One entry per identifier; missing products have exists=False."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Lookup
# ═══════════════════════════════════════════════════════════════════════════════

type BatchGetFn = Callable[[Sequence[str]], Awaitable[list[LookupEntry]]]


@dataclass(frozen=True, slots=True)
class FunctionalLookup:
    """Lookup built from a single async function."""

    _batch_get: BatchGetFn

    async def batch_get(self, identifiers: Sequence[str]) -> list[LookupEntry]:
        return await self._batch_get(identifiers)


def lookup_from(batch_get: BatchGetFn) -> FunctionalLookup:
    """
    Create ProductLookup from a function.

    Example:
        lookup = lookup_from(lambda ids: repo.find_many(ids))
    """
    return FunctionalLookup(_batch_get=batch_get)


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Lookup — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryLookup:
    """In-memory catalog. Counts calls so tests can assert batching."""

    def __init__(self, products: Sequence[Product] = ()) -> None:
        self._products: dict[str, Product] = {p.id: p for p in products}
        self.calls: list[tuple[str, ...]] = []

    def put(self, product: Product) -> None:
        self._products[product.id] = product

    def delete(self, identifier: str) -> None:
        self._products.pop(identifier, None)

    async def batch_get(self, identifiers: Sequence[str]) -> list[LookupEntry]:
        self.calls.append(tuple(identifiers))
        entries: list[LookupEntry] = []
        for ident in identifiers:
            product = self._products.get(ident)
            entries.append(LookupEntry(ident, product is not None, product))
        return entries


__all__ = (
    "LookupEntry",
    "LookupFailure",
    "ProductLookup",
    "BatchGetFn",
    "FunctionalLookup",
    "lookup_from",
    "MemoryLookup",
)
