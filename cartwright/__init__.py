"""
cartwright — storefront pricing, stock validation and refund proration.

    from cartwright import catalog as P   # Products, stock, unit prices
    from cartwright import cart as K      # Cart engine and stores
    from cartwright import loyalty as Y   # Points tiers and accounting
    from cartwright import codes as D     # Discount codes
    from cartwright import checkout as C  # Totals, orders, preview graph
    from cartwright import returns as R   # Refund proration
"""

import logging

from cartwright import catalog
from cartwright import cart
from cartwright import loyalty
from cartwright import codes
from cartwright import checkout
from cartwright import returns
from cartwright._types import Cents, Selection, round_half_up

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = (
    "catalog",
    "cart",
    "loyalty",
    "codes",
    "checkout",
    "returns",
    "Cents",
    "Selection",
    "round_half_up",
)
