"""
Virtual infinity markers and the composite (key, value) ordering.

A Bound stands in for a key or value that sorts below or above every real
one, so range sentinels never have to be built from real data.
"""

from enum import Enum
from typing import Any


class Bound(Enum):
    """Marker that compares below (LOWEST) or above (HIGHEST) any real value."""

    LOWEST = -1
    HIGHEST = 1

    def __repr__(self) -> str:
        return f"Bound.{self.name}"


def compare(a: Any, b: Any) -> int:
    """
    Three-way comparison that understands Bound markers.

    Args:
        a: Left operand, a real orderable value or a Bound.
        b: Right operand, a real orderable value or a Bound.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b.
    """
    a_bound = isinstance(a, Bound)
    b_bound = isinstance(b, Bound)
    if a_bound or b_bound:
        a_rank = a.value if a_bound else 0
        b_rank = b.value if b_bound else 0
        return (a_rank > b_rank) - (a_rank < b_rank)

    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def compare_pairs(key_a: Any, value_a: Any, key_b: Any, value_b: Any) -> int:
    """Compare (key_a, value_a) with (key_b, value_b), key first then value."""
    result = compare(key_a, key_b)
    if result != 0:
        return result
    return compare(value_a, value_b)
