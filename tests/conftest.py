"""Shared catalog fixtures."""

import pytest

from cartwright.catalog import SimpleProduct, VariedProduct
from tests.helpers import make_tee


@pytest.fixture
def darts() -> SimpleProduct:
    return SimpleProduct(id="darts", title="Dart Set", price=10000, stock_quantity=20, images=("darts.jpg",))


@pytest.fixture
def chalk() -> SimpleProduct:
    """In stock, quantity not recorded."""
    return SimpleProduct(id="chalk", title="Chalk", price=300)


@pytest.fixture
def tee() -> VariedProduct:
    return make_tee()
