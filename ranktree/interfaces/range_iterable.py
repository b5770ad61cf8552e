"""
RangeIterable protocol for data structures that support range iteration.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterator
from typing import Any

# A composite bound: (key, value). Either slot may hold a Bound marker.
Pair = tuple[Any, Any]


class RangeIterable(ABC):
    """
    Protocol for data structures that support iteration over a range of
    composite (key, value) pairs.

    Implementations must support:
    - Full iteration via __iter__
    - Range-bounded iteration via iterator(start, end)
    - Async iteration via __aiter__
    - Async range-bounded iteration via async_iterator(start, end)

    Every call returns a fresh iterator; there is no cursor shared
    between calls.
    """

    @abstractmethod
    def __iter__(self) -> Iterator[Pair]:
        """Return an iterator over all (key, value) pairs in sorted order."""
        pass

    @abstractmethod
    def iterator(
        self, start: Pair | None = None, end: Pair | None = None
    ) -> Iterator[Pair]:
        """
        Return an iterator over (key, value) pairs in the specified range.

        Args:
            start: Lower composite bound (inclusive). If None, starts from the beginning.
            end: Upper composite bound (inclusive). If None, iterates to the end.

        Returns:
            Iterator yielding (key, value) tuples in sorted order.
        """
        pass

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Pair]:
        """Return an async iterator over all (key, value) pairs in sorted order."""
        pass

    @abstractmethod
    def async_iterator(
        self, start: Pair | None = None, end: Pair | None = None
    ) -> AsyncIterator[Pair]:
        """
        Return an async iterator over (key, value) pairs in the specified range.

        Args:
            start: Lower composite bound (inclusive). If None, starts from the beginning.
            end: Upper composite bound (inclusive). If None, iterates to the end.

        Returns:
            AsyncIterator yielding (key, value) tuples in sorted order.
        """
        pass
