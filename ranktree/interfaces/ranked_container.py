"""
RankedContainer abstract base class for order-statistics containers.
"""

from abc import abstractmethod
from typing import Any

from ranktree.interfaces.range_iterable import RangeIterable


class RankedContainer(RangeIterable):
    """
    Abstract base class for containers ordered by a composite (key, value)
    pair that can answer rank and range-count queries.

    The value is both payload and tie-breaker, so it must be totally
    ordered. Two elements are the same only if key and value both compare
    equal.

    Implementations:
    - OrderStatisticsTree: AVL tree with per-node left-subtree sizes
    """

    @abstractmethod
    def insert(self, key: Any, value: Any) -> bool:
        """
        Insert a (key, value) pair. No-op if the pair is already present.

        Args:
            key: The primary ordering key.
            value: The payload, also used as tie-breaker.

        Returns:
            True if a new element was added, False if it already existed.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def delete(self, key: Any, value: Any) -> bool:
        """
        Remove a (key, value) pair. Silent no-op if absent.

        Args:
            key: The primary ordering key.
            value: The payload/tie-breaker.

        Returns:
            True if the pair was found and removed, False otherwise.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def search(self, key: Any) -> Any | None:
        """
        Retrieve the value stored under a key, comparing by key only.

        Args:
            key: The key to look up.

        Returns:
            The value if found, None otherwise.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def has(self, key: Any, value: Any) -> bool:
        """
        Check if an exact (key, value) pair exists.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def is_empty(self) -> bool:
        pass

    @abstractmethod
    def size(self) -> int:
        """
        Return the number of elements.

        Time complexity: O(1)
        """
        pass

    @abstractmethod
    def find_minimum_key(self) -> Any:
        pass

    @abstractmethod
    def find_maximum_key(self) -> Any:
        pass

    @abstractmethod
    def find_minimum_object(self) -> Any:
        pass

    @abstractmethod
    def get_rank(self, key: Any, value: Any) -> int:
        """
        Return the number of elements strictly less than (key, value).

        Raises:
            KeyNotPresentError: If the pair is not in the container.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def count_in_range(
        self, lower_key: Any, upper_key: Any, lower_value: Any, upper_value: Any
    ) -> int:
        """
        Count elements strictly between the lower and upper composite bounds.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def count_in_range_special(
        self, lower_key: Any, upper_key: Any, lower_value: Any, upper_value: Any
    ) -> int:
        """
        Count elements from an existing lower element up to (excluding) the
        upper bound.

        Time complexity: O(log N)
        """
        pass

    @abstractmethod
    def get_nodes_in_range(
        self,
        lower_key: Any,
        upper_key: Any,
        lower_value: Any,
        upper_value: Any,
        size: int,
    ) -> list[str]:
        """
        Return str(value) for every element in [lower, upper], ascending.

        Time complexity: O(log N + K)
        """
        pass
