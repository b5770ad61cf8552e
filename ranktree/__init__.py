"""
AVL order-statistics tree and a stock index built on it.

This package provides a balanced tree ordered by a (key, value) pair with:
- insert(key, value) / delete(key, value) - O(log N)
- search(key) - Key-only lookup
- get_rank(key, value) - Number of smaller elements, O(log N)
- count_in_range(...) - Range count via temporary sentinels, O(log N)
- get_nodes_in_range(...) - Ordered range listing, O(log N + K)
"""

from ranktree.engine import StockManager
from ranktree.models.bounds import Bound
from ranktree.models.sortedcontainers import OrderStatisticsTree

__all__ = ["Bound", "OrderStatisticsTree", "StockManager"]
