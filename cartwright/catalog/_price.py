"""
Unit price for a product + selection.
"""

from __future__ import annotations

from cartwright._types import Cents, Selection
from cartwright.catalog._types import Product, VariedProduct


def base_price(product: Product) -> Cents:
    """Sale price when the product is on sale and has one, list price otherwise."""
    if product.is_on_sale and product.offer_price:
        return product.offer_price
    return product.price


def unit_price(product: Product, selection: Selection) -> Cents:
    """
    Effective unit price: base price plus each selected option's adjustment.

    Groups without a selected option contribute nothing. Adjustments may be
    negative and the result is not clamped at zero.
    """
    price = base_price(product)
    if not isinstance(product, VariedProduct):
        return price

    for group in product.groups:
        opt = group.option(selection.get(group.name))
        if opt is not None and opt.price_adjustment:
            price += opt.price_adjustment
    return price


__all__ = ("base_price", "unit_price")
