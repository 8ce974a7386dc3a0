"""
Returnable quantities per order line.
"""

from __future__ import annotations

from collections.abc import Mapping

from cartwright.checkout import OrderSnapshot


def returnable_quantities(
    snapshot: OrderSnapshot,
    returned: Mapping[int, int] | None = None,
    requested: Mapping[int, int] | None = None,
) -> tuple[int, ...]:
    """
    Units still returnable per line, by line index.

    Args:
        snapshot: The placed order
        returned: Units already refunded, by line index
        requested: Units in open (not yet decided) return requests, by line index

    Example:
        returnable_quantities(order, returned={0: 1})  # (1, 3) for lines of 2 and 3
    """
    returned = returned or {}
    requested = requested or {}
    return tuple(
        max(0, line.quantity - returned.get(i, 0) - requested.get(i, 0))
        for i, line in enumerate(snapshot.lines)
    )


__all__ = ("returnable_quantities",)
