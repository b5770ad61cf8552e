"""
Sorted container implementations for the order-statistics indices.
"""

from ranktree.models.sortedcontainers.avl_tree import OrderStatisticsTree

__all__ = ["OrderStatisticsTree"]
