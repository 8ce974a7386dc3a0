"""
Raw product documents → tagged Product variant.

The document store hands out loosely-shaped camelCase records where
variations and stock fields may be missing. Parse once at the boundary so the
rest of the engine branches on the variant, never on field presence.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cartwright.catalog._types import (
    Product,
    SimpleProduct,
    VariedProduct,
    VariationGroup,
    VariationOption,
)


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class OptionDocument(_Document):
    value: str
    price_adjustment: int | None = None
    in_stock: bool | None = None
    stock_quantity: int | None = Field(default=None, ge=0)


class VariationDocument(_Document):
    name: str
    options: list[OptionDocument] = Field(default_factory=list)


class ProductDocument(_Document):
    """Raw product record as stored; `slug` wins over `_id` as identity."""

    object_id: str | None = Field(default=None, alias="_id")
    slug: str | None = None
    title: str
    price: int = Field(ge=0)
    offer_price: int | None = Field(default=None, ge=0)
    is_on_sale: bool = False
    in_stock: bool = True
    stock_quantity: int = Field(default=0, ge=0)
    images: list[str] = Field(default_factory=list)
    variations: list[VariationDocument] | None = None

    @property
    def identifier(self) -> str:
        ident = self.slug or self.object_id
        if not ident:
            raise ValueError(f"Product {self.title!r} has neither slug nor _id")
        return ident

    def to_product(self) -> Product:
        if not self.variations:
            return SimpleProduct(
                id=self.identifier,
                title=self.title,
                price=self.price,
                offer_price=self.offer_price,
                is_on_sale=self.is_on_sale,
                in_stock=self.in_stock,
                stock_quantity=self.stock_quantity,
                images=tuple(self.images),
            )

        groups = tuple(
            VariationGroup(
                name=v.name,
                options=tuple(
                    VariationOption(
                        value=o.value,
                        price_adjustment=o.price_adjustment or 0,
                        in_stock=o.in_stock,
                        stock_quantity=o.stock_quantity,
                    )
                    for o in v.options
                ),
            )
            for v in self.variations
        )
        return VariedProduct(
            id=self.identifier,
            title=self.title,
            price=self.price,
            groups=groups,
            offer_price=self.offer_price,
            is_on_sale=self.is_on_sale,
            images=tuple(self.images),
        )


def parse_product(raw: Mapping[str, Any]) -> Product:
    """
    Parse a raw document into SimpleProduct | VariedProduct.

    Raises pydantic.ValidationError on malformed records.

    Example:
        product = parse_product({"slug": "dart-set", "title": "Dart Set", "price": 2999})
    """
    return ProductDocument.model_validate(raw).to_product()


__all__ = (
    "OptionDocument",
    "VariationDocument",
    "ProductDocument",
    "parse_product",
)
