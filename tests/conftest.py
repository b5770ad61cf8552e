"""
Shared pytest fixtures for order-statistics tree and stock manager tests.
"""

import random

import pytest

from ranktree.engine import StockManager
from ranktree.models.sortedcontainers import OrderStatisticsTree


@pytest.fixture
def tree():
    """Provide a fresh, empty OrderStatisticsTree."""
    return OrderStatisticsTree()


@pytest.fixture
def rng():
    """Provide a seeded random generator so failures are reproducible."""
    return random.Random(20240611)


@pytest.fixture
def sample_pairs():
    """Provide sample (key, value) pairs, including duplicate keys."""
    return [
        (5, "e"),
        (3, "c"),
        (8, "h"),
        (3, "a"),
        (1, "x"),
        (8, "b"),
        (7, "g"),
    ]


@pytest.fixture
def populated_tree(sample_pairs):
    """Provide a tree holding sample_pairs."""
    tree = OrderStatisticsTree()
    for key, value in sample_pairs:
        tree.insert(key, value)
    return tree


@pytest.fixture
def manager():
    """Provide a StockManager that checks both indices after every write."""
    return StockManager(validate_on_write=True)


@pytest.fixture
def stocked_manager(manager):
    """Provide a manager with a handful of listed stocks."""
    manager.add_stock("AAPL", 1, 150.0)
    manager.add_stock("MSFT", 2, 300.0)
    manager.add_stock("GOOG", 3, 150.0)
    manager.add_stock("IBM", 4, 120.0)
    manager.add_stock("T", 5, 20.0)
    return manager
