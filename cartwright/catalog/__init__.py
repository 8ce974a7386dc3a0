"""
Catalog — product variants, stock resolution, unit pricing.

    from cartwright import catalog as P

    product = P.parse_product(raw_document)
    level = P.stock_level(product, {"Size": "L"})
    price = P.unit_price(product, {"Size": "L"})
"""

from __future__ import annotations

from cartwright.catalog._types import (
    VariationOption,
    VariationGroup,
    SimpleProduct,
    VariedProduct,
    Product,
    Unknown,
    Limited,
    OutOfStock,
    StockLevel,
)
from cartwright.catalog._stock import (
    selected_options,
    stock_level,
    available_quantity,
    in_stock,
)
from cartwright.catalog._price import base_price, unit_price
from cartwright.catalog._documents import (
    OptionDocument,
    VariationDocument,
    ProductDocument,
    parse_product,
)

__all__ = (
    # Types
    "VariationOption",
    "VariationGroup",
    "SimpleProduct",
    "VariedProduct",
    "Product",
    "Unknown",
    "Limited",
    "OutOfStock",
    "StockLevel",
    # Stock
    "selected_options",
    "stock_level",
    "available_quantity",
    "in_stock",
    # Price
    "base_price",
    "unit_price",
    # Documents
    "OptionDocument",
    "VariationDocument",
    "ProductDocument",
    "parse_product",
)
