"""
Client layer built on the order-statistics tree.
"""

from ranktree.engine.stock_manager import StockManager

__all__ = ["StockManager"]
