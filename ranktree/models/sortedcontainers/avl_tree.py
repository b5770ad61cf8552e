"""
AVL tree with per-node left-subtree sizes (order-statistics tree).

Elements are ordered by the composite (key, value) pair, giving O(log N)
insert, delete, rank, and range count, plus O(log N + K) range listing.
"""

import logging
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from typing import Any

from ranktree.interfaces.range_iterable import Pair
from ranktree.interfaces.ranked_container import RankedContainer
from ranktree.models.bounds import compare, compare_pairs
from ranktree.models.exceptions import (
    EmptyTreeError,
    KeyNotPresentError,
    RangeSizeMismatchError,
    TreeInvariantError,
)

logger = logging.getLogger(__name__)


@dataclass
class Node:
    """Node in the AVL tree."""

    key: Any
    value: Any
    height: int = 1
    left_size: int = 0
    left: "Node | None" = None
    right: "Node | None" = None

    def compare(self, key: Any, value: Any) -> int:
        """Compare this node's (key, value) against the given pair."""
        return compare_pairs(self.key, self.value, key, value)


def _height(node: Node | None) -> int:
    return node.height if node is not None else 0


def _update_height(node: Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


class OrderStatisticsTree(RankedContainer):
    """
    AVL tree implementation of RankedContainer.

    Properties maintained after every public call:
    1. |height(left) - height(right)| <= 1 for every node
    2. height(node) = 1 + max(height(left), height(right))
    3. left_size(node) = number of elements in the left subtree
    4. Left subtree < (key, value) < right subtree

    search() descends by key alone. It is only reliable when every key
    passed to it is held by at most one element; with several values
    under one key it returns whichever one the descent meets first.

    Not thread-safe. count_in_range() and count_in_range_special() insert
    and remove sentinels, so they need exclusive access like any write.
    """

    def __init__(self) -> None:
        self._root: Node | None = None
        self._size: int = 0

    def insert(self, key: Any, value: Any) -> bool:
        """Insert a (key, value) pair. O(log N)"""
        self._root, created = self._insert(self._root, key, value)
        if created:
            self._size += 1
        return created

    def delete(self, key: Any, value: Any) -> bool:
        """Remove a (key, value) pair. O(log N)"""
        self._root, removed = self._delete(self._root, key, value)
        if removed:
            self._size -= 1
        else:
            logger.debug(f"Delete miss for ({key!r}, {value!r})")
        return removed

    def search(self, key: Any) -> Any | None:
        """Retrieve a value by key only. O(log N)"""
        current = self._root
        while current is not None:
            result = compare(key, current.key)
            if result == 0:
                return current.value
            current = current.left if result < 0 else current.right
        return None

    def has(self, key: Any, value: Any) -> bool:
        return self._find_node(key, value) is not None

    def is_empty(self) -> bool:
        return self._root is None

    def size(self) -> int:
        return self._size

    def height(self) -> int:
        return _height(self._root)

    def __len__(self) -> int:
        return self._size

    def find_minimum_key(self) -> Any:
        return self._leftmost(self._root, "find_minimum_key").key

    def find_maximum_key(self) -> Any:
        return self._rightmost(self._root, "find_maximum_key").key

    def find_minimum_object(self) -> Any:
        return self._leftmost(self._root, "find_minimum_object").value

    def get_rank(self, key: Any, value: Any) -> int:
        """Count elements strictly less than (key, value). O(log N)"""
        rank = 0
        current = self._root
        while current is not None:
            result = current.compare(key, value)
            if result == 0:
                return rank + current.left_size
            if result > 0:
                current = current.left
            else:
                rank += current.left_size + 1
                current = current.right
        raise KeyNotPresentError(key, value)

    def count_in_range(
        self, lower_key: Any, upper_key: Any, lower_value: Any, upper_value: Any
    ) -> int:
        """
        Count elements strictly between (lower_key, lower_value) and
        (upper_key, upper_value). O(log N)

        Both bounds are inserted as temporary sentinels so their ranks can
        be read, then removed again. A bound that is already a real element
        is left in place, and being a bound it is not counted. Pass
        Bound.LOWEST / Bound.HIGHEST as the values to count every element
        whose key lies in [lower_key, upper_key].

        Returns:
            The count, or 0 if the lower bound sorts after the upper bound.
        """
        if compare_pairs(lower_key, lower_value, upper_key, upper_value) > 0:
            return 0

        lower_added = self.insert(lower_key, lower_value)
        upper_added = self.insert(upper_key, upper_value)
        try:
            count = (
                self.get_rank(upper_key, upper_value)
                - self.get_rank(lower_key, lower_value)
                - 1
            )
        finally:
            if upper_added:
                self.delete(upper_key, upper_value)
            if lower_added:
                self.delete(lower_key, lower_value)

        logger.debug(
            f"count_in_range ({lower_key!r}, {lower_value!r})..."
            f"({upper_key!r}, {upper_value!r}) = {max(count, 0)}"
        )
        # Equal bounds collapse to one element and give -1
        return max(count, 0)

    def count_in_range_special(
        self, lower_key: Any, upper_key: Any, lower_value: Any, upper_value: Any
    ) -> int:
        """
        Count elements from the real element (lower_key, lower_value)
        inclusive up to the upper bound exclusive. O(log N)

        Only the upper bound is inserted as a sentinel.

        Raises:
            KeyNotPresentError: If the lower pair is not in the tree.
        """
        if compare_pairs(lower_key, lower_value, upper_key, upper_value) > 0:
            return 0

        upper_added = self.insert(upper_key, upper_value)
        try:
            return self.get_rank(upper_key, upper_value) - self.get_rank(
                lower_key, lower_value
            )
        finally:
            if upper_added:
                self.delete(upper_key, upper_value)

    def get_nodes_in_range(
        self,
        lower_key: Any,
        upper_key: Any,
        lower_value: Any,
        upper_value: Any,
        size: int,
    ) -> list[str]:
        """
        Return str(value) for every element in [lower, upper]. O(log N + K)

        Args:
            lower_key: Lower bound key.
            upper_key: Upper bound key.
            lower_value: Lower bound tie-breaker (a value or a Bound).
            upper_value: Upper bound tie-breaker (a value or a Bound).
            size: Number of elements the caller counted in the range.

        Returns:
            Exactly `size` string representations in ascending order.

        Raises:
            RangeSizeMismatchError: If the range holds a different number
                of elements than `size`.
        """
        result: list[str] = []
        self._collect_range(
            self._root, lower_key, upper_key, lower_value, upper_value, result
        )
        if len(result) != size:
            raise RangeSizeMismatchError(size, len(result))
        return result

    def check_invariants(self) -> None:
        """
        Verify balance, height, left_size, and ordering for every node.

        Raises:
            TreeInvariantError: On the first violation found.
        """
        count = self._check_node(self._root)[1]
        if count != self._size:
            raise TreeInvariantError(
                f"size counter {self._size} != element count {count}"
            )

        previous: Pair | None = None
        for key, value in self:
            if previous is not None and compare_pairs(*previous, key, value) >= 0:
                raise TreeInvariantError("in-order sequence not ascending", key, value)
            previous = (key, value)

    def __iter__(self) -> Iterator[Pair]:
        return self.iterator()

    def iterator(
        self, start: Pair | None = None, end: Pair | None = None
    ) -> Iterator[Pair]:
        return _RangeIterator(self._root, start, end)

    def __aiter__(self) -> AsyncIterator[Pair]:
        return self.async_iterator()

    def async_iterator(
        self, start: Pair | None = None, end: Pair | None = None
    ) -> AsyncIterator[Pair]:
        return _AsyncRangeIterator(self._root, start, end)

    def _find_node(self, key: Any, value: Any) -> Node | None:
        """Find node by composite pair."""
        current = self._root
        while current is not None:
            result = current.compare(key, value)
            if result == 0:
                return current
            current = current.left if result > 0 else current.right
        return None

    def _leftmost(self, node: Node | None, operation: str) -> Node:
        if node is None:
            raise EmptyTreeError(operation)
        while node.left is not None:
            node = node.left
        return node

    def _rightmost(self, node: Node | None, operation: str) -> Node:
        if node is None:
            raise EmptyTreeError(operation)
        while node.right is not None:
            node = node.right
        return node

    def _insert(self, node: Node | None, key: Any, value: Any) -> tuple[Node, bool]:
        """Insert below node. Returns the new subtree root and whether a node was created."""
        if node is None:
            return Node(key=key, value=value), True

        result = node.compare(key, value)
        if result > 0:
            node.left, created = self._insert(node.left, key, value)
            if created:
                node.left_size += 1
        elif result < 0:
            node.right, created = self._insert(node.right, key, value)
        else:
            return node, False

        if not created:
            return node, False
        return self._rebalance(node), True

    def _delete(
        self, node: Node | None, key: Any, value: Any
    ) -> tuple[Node | None, bool]:
        """Delete below node. Returns the new subtree root and whether a node was removed."""
        if node is None:
            return None, False

        result = node.compare(key, value)
        if result > 0:
            node.left, removed = self._delete(node.left, key, value)
            if removed:
                node.left_size -= 1
        elif result < 0:
            node.right, removed = self._delete(node.right, key, value)
        else:
            if node.left is None:
                return node.right, True
            if node.right is None:
                return node.left, True

            # Two children: take over the in-order successor and remove it
            successor = self._leftmost(node.right, "delete")
            node.key = successor.key
            node.value = successor.value
            node.right, removed = self._delete(node.right, node.key, node.value)

        if not removed:
            return node, False
        return self._rebalance(node), True

    def _rebalance(self, node: Node) -> Node:
        """Restore height and AVL balance at node after a child changed."""
        _update_height(node)
        balance = _height(node.right) - _height(node.left)

        if balance > 1:
            # Right-left case
            if _height(node.right.left) > _height(node.right.right):
                node.right = self._rotate_right(node.right)
            return self._rotate_left(node)

        if balance < -1:
            # Left-right case
            if _height(node.left.right) > _height(node.left.left):
                node.left = self._rotate_left(node.left)
            return self._rotate_right(node)

        return node

    def _rotate_left(self, node: Node) -> Node:
        """Left rotation. Returns the new subtree root."""
        pivot = node.right
        node.right = pivot.left
        pivot.left = node

        # pivot's left subtree is now node plus node's left subtree
        pivot.left_size += node.left_size + 1

        _update_height(node)
        _update_height(pivot)
        return pivot

    def _rotate_right(self, node: Node) -> Node:
        """Right rotation. Returns the new subtree root."""
        pivot = node.left
        node.left = pivot.right
        pivot.right = node

        # node keeps only what was pivot's right subtree
        node.left_size -= pivot.left_size + 1

        _update_height(node)
        _update_height(pivot)
        return pivot

    def _collect_range(
        self,
        node: Node | None,
        lower_key: Any,
        upper_key: Any,
        lower_value: Any,
        upper_value: Any,
        result: list[str],
    ) -> None:
        """Pruned in-order walk appending str(value) for nodes in [lower, upper]."""
        if node is None:
            return

        above_lower = node.compare(lower_key, lower_value) >= 0
        below_upper = node.compare(upper_key, upper_value) <= 0

        if above_lower:
            self._collect_range(
                node.left, lower_key, upper_key, lower_value, upper_value, result
            )
        if above_lower and below_upper:
            result.append(str(node.value))
        if below_upper:
            self._collect_range(
                node.right, lower_key, upper_key, lower_value, upper_value, result
            )

    def _check_node(self, node: Node | None) -> tuple[int, int]:
        """Check the subtree at node. Returns its (height, element count)."""
        if node is None:
            return 0, 0

        left_height, left_count = self._check_node(node.left)
        right_height, right_count = self._check_node(node.right)

        if node.height != 1 + max(left_height, right_height):
            raise TreeInvariantError(
                f"stored height {node.height} != computed "
                f"{1 + max(left_height, right_height)}",
                node.key,
                node.value,
            )
        if abs(right_height - left_height) > 1:
            raise TreeInvariantError(
                f"balance factor {right_height - left_height}", node.key, node.value
            )
        if node.left_size != left_count:
            raise TreeInvariantError(
                f"left_size {node.left_size} != left subtree count {left_count}",
                node.key,
                node.value,
            )

        return node.height, left_count + right_count + 1


class _RangeIterator(Iterator[Pair]):
    """Iterator for inclusive composite range queries on the AVL tree."""

    def __init__(self, root: Node | None, start: Pair | None, end: Pair | None) -> None:
        self._stack: list[Node] = []
        self._end = end

        # Initialize stack with nodes >= start
        self._push_left_path(root, start)

    def __iter__(self) -> Iterator[Pair]:
        return self

    def __next__(self) -> Pair:
        if not self._stack:
            raise StopIteration

        node = self._stack.pop()

        # Check end bound
        if self._end is not None and node.compare(*self._end) > 0:
            self._stack.clear()
            raise StopIteration

        # Push right subtree's left path
        self._push_left_path(node.right, None)

        return node.key, node.value

    def _push_left_path(self, node: Node | None, start: Pair | None) -> None:
        """Push leftmost path to stack, respecting start bound."""
        while node:
            if start is not None and node.compare(*start) < 0:
                # Skip nodes less than start
                node = node.right
            else:
                self._stack.append(node)
                node = node.left


class _AsyncRangeIterator(AsyncIterator[Pair]):
    """Async iterator for range queries on the AVL tree (in-memory, no I/O)."""

    def __init__(self, root: Node | None, start: Pair | None, end: Pair | None) -> None:
        self._inner = _RangeIterator(root, start, end)

    def __aiter__(self) -> "_AsyncRangeIterator":
        return self

    async def __anext__(self) -> Pair:
        try:
            return next(self._inner)
        except StopIteration:
            raise StopAsyncIteration from None
