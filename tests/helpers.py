"""Builders and Result helpers shared across test modules."""

from kungfu import Ok, Error

from cartwright.catalog import VariedProduct, VariationGroup, VariationOption


def make_tee(
    *,
    small: int | None = 5,
    medium: int | None = 3,
    red_stock: int | None = 10,
    blue_in_stock: bool | None = True,
) -> VariedProduct:
    """Two-axis product: Size x Color, stock tracked per option."""
    return VariedProduct(
        id="tee",
        title="Club Tee",
        price=2000,
        groups=(
            VariationGroup("Size", (
                VariationOption("S", stock_quantity=small),
                VariationOption("M", price_adjustment=200, stock_quantity=medium),
            )),
            VariationGroup("Color", (
                VariationOption("Red", stock_quantity=red_stock),
                VariationOption("Blue", price_adjustment=-100, in_stock=blue_in_stock, stock_quantity=10),
            )),
        ),
        images=("tee.jpg",),
    )


def ok(result):
    """Unwrap Ok or fail the test."""
    match result:
        case Ok(value):
            return value
        case Error(error):
            raise AssertionError(f"expected Ok, got Error({error!r})")


def err(result):
    """Unwrap Error or fail the test."""
    match result:
        case Error(error):
            return error
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")
