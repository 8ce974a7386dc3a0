"""
Stock resolution for a product + selection.
"""

from __future__ import annotations

from cartwright._types import Selection
from cartwright.catalog._types import (
    Product,
    SimpleProduct,
    VariedProduct,
    VariationOption,
    StockLevel,
    Unknown,
    Limited,
    OutOfStock,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Selected Options
# ═══════════════════════════════════════════════════════════════════════════════


def selected_options(
    product: VariedProduct,
    selection: Selection,
) -> tuple[VariationOption, ...] | None:
    """
    Resolve one option per group.

    Returns None while the selection is incomplete or names an unknown value.
    """
    chosen: list[VariationOption] = []
    for group in product.groups:
        opt = group.option(selection.get(group.name))
        if opt is None:
            return None
        chosen.append(opt)
    return tuple(chosen)


# ═══════════════════════════════════════════════════════════════════════════════
# stock_level() — Tri-State Resolution
# ═══════════════════════════════════════════════════════════════════════════════


def stock_level(product: Product, selection: Selection) -> StockLevel:
    """
    Resolve availability for a product + selection.

    Simple products use the product-level flag and quantity. Varied products
    are limited by whichever selected option runs out first.

    Example:
        match stock_level(product, {"Size": "L"}):
            case Limited(n): ...
            case Unknown(): ...
            case OutOfStock(): ...
    """
    match product:
        case SimpleProduct():
            return _simple_level(product)
        case VariedProduct():
            return _varied_level(product, selection)


def _simple_level(product: SimpleProduct) -> StockLevel:
    if not product.in_stock:
        return OutOfStock()
    if product.stock_quantity > 0:
        return Limited(product.stock_quantity)
    return Unknown()


def _varied_level(product: VariedProduct, selection: Selection) -> StockLevel:
    if not product.groups:
        return Unknown()

    options = selected_options(product, selection)
    if options is None:
        return OutOfStock()

    # Undefined flag defaults to in stock
    if not all(opt.in_stock is not False for opt in options):
        return OutOfStock()

    tracked = [opt.stock_quantity for opt in options if opt.stock_quantity is not None]
    if not tracked:
        return Unknown()

    quantity = min(tracked)
    if quantity <= 0:
        return OutOfStock()
    return Limited(quantity)


# ═══════════════════════════════════════════════════════════════════════════════
# Integer / Boolean Views
# ═══════════════════════════════════════════════════════════════════════════════


def available_quantity(product: Product, selection: Selection) -> int:
    """
    Known available quantity; 0 when not recorded or not purchasable.

    A simple product reports its recorded quantity as is, even when flagged
    out of stock; in_stock() carries the flag.
    """
    if isinstance(product, SimpleProduct):
        return max(0, product.stock_quantity)
    match stock_level(product, selection):
        case Limited(quantity):
            return quantity
        case _:
            return 0


def in_stock(product: Product, selection: Selection) -> bool:
    return not isinstance(stock_level(product, selection), OutOfStock)


__all__ = (
    "selected_options",
    "stock_level",
    "available_quantity",
    "in_stock",
)
