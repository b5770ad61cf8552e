"""
Custom exceptions for the order-statistics tree and its stock client.
"""

from typing import Any


class KeyNotPresentError(ValueError):
    """
    Raised when a rank is requested for a (key, value) pair not in the tree.

    This is a caller-contract violation: range counting always makes the
    queried pair present before asking for its rank.
    """

    def __init__(self, key: Any, value: Any):
        """
        Initialize missing-pair error.

        Args:
            key: Key of the queried pair.
            value: Value (tie-breaker) of the queried pair.
        """
        self.key = key
        self.value = value
        super().__init__(f"No element ({key!r}, {value!r}) in tree")


class EmptyTreeError(LookupError):
    """Raised when a minimum or maximum is requested from an empty tree."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} called on an empty tree")


class RangeSizeMismatchError(ValueError):
    """
    Raised when a range enumeration finds a different number of elements
    than the caller announced.
    """

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Range enumeration expected {expected} elements, found {actual}"
        )


class TreeInvariantError(RuntimeError):
    """Raised by the invariant checker when a tree is structurally corrupt."""

    def __init__(self, reason: str, key: Any = None, value: Any = None):
        self.reason = reason
        self.key = key
        self.value = value
        super().__init__(f"Tree invariant violated at ({key!r}, {value!r}): {reason}")


class InvalidStockOperationError(ValueError):
    """Raised when a stock manager call fails validation."""
