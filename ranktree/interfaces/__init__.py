"""
Abstract base classes and protocols for the order-statistics containers.
"""

from ranktree.interfaces.range_iterable import Pair, RangeIterable
from ranktree.interfaces.ranked_container import RankedContainer

__all__ = ["Pair", "RangeIterable", "RankedContainer"]
