"""
Data models for the order-statistics tree and the stock indices.
"""

from ranktree.models.bounds import Bound, compare, compare_pairs
from ranktree.models.exceptions import (
    EmptyTreeError,
    InvalidStockOperationError,
    KeyNotPresentError,
    RangeSizeMismatchError,
    TreeInvariantError,
)
from ranktree.models.sortedcontainers import OrderStatisticsTree
from ranktree.models.stock import PriceUpdate, Stock

__all__ = [
    "Bound",
    "compare",
    "compare_pairs",
    "EmptyTreeError",
    "InvalidStockOperationError",
    "KeyNotPresentError",
    "RangeSizeMismatchError",
    "TreeInvariantError",
    "OrderStatisticsTree",
    "PriceUpdate",
    "Stock",
]
