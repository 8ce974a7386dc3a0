"""
Catalog types — product variants and stock levels.
"""

from __future__ import annotations

from dataclasses import dataclass

from cartwright._types import Cents

# ═══════════════════════════════════════════════════════════════════════════════
# Variations
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class VariationOption:
    """
    One choosable value inside a variation group.

    in_stock=None is legacy data with no flag recorded (treated as in stock).
    stock_quantity=None means stock is not tracked for this option.
    """

    value: str
    price_adjustment: Cents = 0
    in_stock: bool | None = None
    stock_quantity: int | None = None


@dataclass(frozen=True, slots=True)
class VariationGroup:
    """Named axis of variation, e.g. Size or Color."""

    name: str
    options: tuple[VariationOption, ...]

    def option(self, value: str | None) -> VariationOption | None:
        if value is None:
            return None
        for opt in self.options:
            if opt.value == value:
                return opt
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# Product — Tagged Variant
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SimpleProduct:
    """Product without variation groups. Stock lives on the product."""

    id: str
    title: str
    price: Cents
    offer_price: Cents | None = None
    is_on_sale: bool = False
    in_stock: bool = True
    stock_quantity: int = 0
    images: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class VariedProduct:
    """Product with variation groups. Stock lives on each option."""

    id: str
    title: str
    price: Cents
    groups: tuple[VariationGroup, ...]
    offer_price: Cents | None = None
    is_on_sale: bool = False
    images: tuple[str, ...] = ()


type Product = SimpleProduct | VariedProduct


# ═══════════════════════════════════════════════════════════════════════════════
# Stock Level — Tri-State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Unknown:
    """
    In stock, but no quantity recorded.

    Legacy data stores this as quantity 0; it does NOT mean sold out.
    """


@dataclass(frozen=True, slots=True)
class Limited:
    """In stock with a known positive quantity."""

    quantity: int


@dataclass(frozen=True, slots=True)
class OutOfStock:
    """Not purchasable: sold out, flagged out of stock or incomplete selection."""


type StockLevel = Unknown | Limited | OutOfStock


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "VariationOption",
    "VariationGroup",
    "SimpleProduct",
    "VariedProduct",
    "Product",
    "Unknown",
    "Limited",
    "OutOfStock",
    "StockLevel",
)
