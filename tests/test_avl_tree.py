"""
Tests for OrderStatisticsTree: balancing, lookups, rank and range queries.
"""

import pytest

from ranktree.models.bounds import Bound
from ranktree.models.exceptions import (
    EmptyTreeError,
    KeyNotPresentError,
    RangeSizeMismatchError,
    TreeInvariantError,
)
from ranktree.models.sortedcontainers import OrderStatisticsTree


class TestBalancing:
    """Tests for insert, delete and the four rotation cases."""

    def test_ascending_inserts_rotate_left(self, tree):
        """Keys 1, 2, 3 in order end with 2 at the root."""
        for key in (1, 2, 3):
            tree.insert(key, "v")
            assert tree.height() <= 2
            tree.check_invariants()

        assert tree._root.key == 2
        assert tree._root.left_size == 1

    def test_descending_inserts_rotate_right(self, tree):
        for key in (3, 2, 1):
            tree.insert(key, "v")

        assert tree._root.key == 2
        assert tree.height() == 2
        tree.check_invariants()

    def test_left_right_case(self, tree):
        for key in (3, 1, 2):
            tree.insert(key, "v")

        assert tree._root.key == 2
        tree.check_invariants()

    def test_right_left_case(self, tree):
        for key in (1, 3, 2):
            tree.insert(key, "v")

        assert tree._root.key == 2
        tree.check_invariants()

    def test_delete_after_rotation(self, tree):
        """Deleting key 2 from {1, 2, 3} leaves {1, 3} balanced."""
        for key in (1, 2, 3):
            tree.insert(key, "v")

        assert tree.delete(2, "v")
        assert list(tree) == [(1, "v"), (3, "v")]
        assert tree.size() == 2
        tree.check_invariants()

    def test_delete_with_balanced_sibling(self, tree):
        """A balanced right child after a delete takes a single left rotation."""
        for key in (2, 1, 4, 3, 5):
            tree.insert(key, "v")

        tree.delete(1, "v")

        assert tree._root.key == 4
        assert [k for k, _ in tree] == [2, 3, 4, 5]
        tree.check_invariants()

    def test_delete_node_with_two_children(self, tree):
        for key in range(1, 8):
            tree.insert(key, "v")
        root_key = tree._root.key

        assert tree.delete(root_key, "v")
        assert [k for k, _ in tree] == [k for k in range(1, 8) if k != root_key]
        tree.check_invariants()

    def test_delete_to_empty(self, tree):
        tree.insert(1, "a")
        tree.delete(1, "a")

        assert tree.is_empty()
        assert tree.size() == 0
        assert tree.height() == 0


class TestInsertDelete:
    """Tests for idempotent insert and silent delete misses."""

    def test_insert_reports_creation(self, tree):
        assert tree.insert(1, "a")
        assert not tree.insert(1, "a")
        assert tree.size() == 1

    def test_duplicate_keys_ordered_by_value(self, tree):
        """Same key with different values are distinct elements."""
        tree.insert(1, "b")
        tree.insert(1, "a")
        tree.insert(1, "c")

        assert list(tree) == [(1, "a"), (1, "b"), (1, "c")]
        tree.check_invariants()

    def test_duplicate_insert_leaves_tree_unchanged(self, populated_tree):
        before = list(populated_tree)

        populated_tree.insert(3, "c")

        assert list(populated_tree) == before
        populated_tree.check_invariants()

    def test_delete_miss_is_silent(self, populated_tree):
        before = list(populated_tree)

        assert not populated_tree.delete(3, "zzz")
        assert not populated_tree.delete(42, "a")

        assert list(populated_tree) == before
        assert populated_tree.size() == 7
        populated_tree.check_invariants()

    def test_delete_on_empty_tree(self, tree):
        assert not tree.delete(1, "a")
        assert tree.is_empty()

    def test_delete_requires_matching_value(self, populated_tree):
        """Only the exact (key, value) pair is removed."""
        assert populated_tree.delete(3, "a")

        assert populated_tree.has(3, "c")
        assert not populated_tree.has(3, "a")


class TestLookups:
    """Tests for search, has and min/max walks."""

    def test_search_by_key(self, populated_tree):
        assert populated_tree.search(5) == "e"
        assert populated_tree.search(7) == "g"
        assert populated_tree.search(4) is None

    def test_search_empty(self, tree):
        assert tree.search(1) is None

    def test_search_with_shared_key(self, tree):
        """Several values under one key: search returns one of them."""
        for value in ("b", "a", "d", "c"):
            tree.insert(4, value)
        tree.insert(2, "z")
        tree.insert(6, "y")

        assert tree.search(4) in {"a", "b", "c", "d"}
        assert tree.search(2) == "z"
        assert tree.search(5) is None

    def test_has(self, populated_tree):
        assert populated_tree.has(8, "b")
        assert not populated_tree.has(8, "a")

    def test_min_and_max(self, populated_tree):
        assert populated_tree.find_minimum_key() == 1
        assert populated_tree.find_maximum_key() == 8
        assert populated_tree.find_minimum_object() == "x"

    def test_min_max_on_empty_tree(self, tree):
        with pytest.raises(EmptyTreeError):
            tree.find_minimum_key()
        with pytest.raises(EmptyTreeError):
            tree.find_maximum_key()
        with pytest.raises(EmptyTreeError):
            tree.find_minimum_object()

    def test_len(self, populated_tree):
        assert len(populated_tree) == 7
        assert not populated_tree.is_empty()


class TestRank:
    """Tests for get_rank."""

    def test_rank_of_each_element(self, populated_tree):
        expected = [(1, "x"), (3, "a"), (3, "c"), (5, "e"), (7, "g"), (8, "b"), (8, "h")]
        for index, (key, value) in enumerate(expected):
            assert populated_tree.get_rank(key, value) == index

    def test_rank_of_absent_pair(self, populated_tree):
        with pytest.raises(KeyNotPresentError) as exc_info:
            populated_tree.get_rank(3, "b")

        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.key == 3
        assert exc_info.value.value == "b"

    def test_rank_on_empty_tree(self, tree):
        with pytest.raises(KeyNotPresentError):
            tree.get_rank(1, "a")


class TestCountInRange:
    """Tests for count_in_range and count_in_range_special."""

    def test_bound_values_count_whole_key_range(self, populated_tree):
        assert populated_tree.count_in_range(3, 8, Bound.LOWEST, Bound.HIGHEST) == 6
        assert populated_tree.count_in_range(3, 7, Bound.LOWEST, Bound.HIGHEST) == 4
        assert populated_tree.count_in_range(0, 100, Bound.LOWEST, Bound.HIGHEST) == 7

    def test_sentinels_are_removed(self, populated_tree):
        before = list(populated_tree)

        populated_tree.count_in_range(2, 6, Bound.LOWEST, Bound.HIGHEST)

        assert list(populated_tree) == before
        assert populated_tree.size() == 7
        populated_tree.check_invariants()

    def test_real_bounds_are_excluded(self, populated_tree):
        """Bounds that are real elements are not counted and stay in the tree."""
        assert populated_tree.count_in_range(3, 8, "c", "b") == 2
        assert populated_tree.has(3, "c")
        assert populated_tree.has(8, "b")
        assert populated_tree.size() == 7

    def test_equal_value_endpoints(self, tree):
        """(10, V) and (20, V) as bounds enclose nothing."""
        tree.insert(10, "V")
        tree.insert(20, "V")

        assert tree.count_in_range(10, 20, "V", "V") == 0
        assert list(tree) == [(10, "V"), (20, "V")]

    def test_empty_range(self, populated_tree):
        assert populated_tree.count_in_range(4, 4, Bound.LOWEST, Bound.HIGHEST) == 0

    def test_inverted_range(self, populated_tree):
        assert populated_tree.count_in_range(8, 3, Bound.LOWEST, Bound.HIGHEST) == 0
        assert populated_tree.size() == 7

    def test_identical_bounds(self, populated_tree):
        assert populated_tree.count_in_range(4, 4, "q", "q") == 0
        assert not populated_tree.has(4, "q")

    def test_empty_tree(self, tree):
        assert tree.count_in_range(1, 10, Bound.LOWEST, Bound.HIGHEST) == 0
        assert tree.is_empty()

    def test_special_counts_from_real_lower_element(self, populated_tree):
        assert populated_tree.count_in_range_special(3, 8, "a", Bound.HIGHEST) == 6
        assert populated_tree.count_in_range_special(1, 3, "x", Bound.HIGHEST) == 3
        assert populated_tree.size() == 7

    def test_special_requires_lower_element(self, populated_tree):
        with pytest.raises(KeyNotPresentError):
            populated_tree.count_in_range_special(2, 8, "a", Bound.HIGHEST)

        assert populated_tree.size() == 7
        populated_tree.check_invariants()


class TestNodesInRange:
    """Tests for get_nodes_in_range."""

    def test_lists_payloads_in_order(self, populated_tree):
        result = populated_tree.get_nodes_in_range(
            3, 7, Bound.LOWEST, Bound.HIGHEST, 4
        )
        assert result == ["a", "c", "e", "g"]

    def test_str_of_payload(self, tree):
        tree.insert(1, 10)
        tree.insert(2, 20)

        assert tree.get_nodes_in_range(0, 5, Bound.LOWEST, Bound.HIGHEST, 2) == [
            "10",
            "20",
        ]

    def test_inclusive_real_bounds(self, populated_tree):
        result = populated_tree.get_nodes_in_range(3, 8, "c", "b", 4)
        assert result == ["c", "e", "g", "b"]

    def test_size_mismatch(self, populated_tree):
        with pytest.raises(RangeSizeMismatchError) as exc_info:
            populated_tree.get_nodes_in_range(3, 7, Bound.LOWEST, Bound.HIGHEST, 3)

        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 4

    def test_repeated_calls_are_independent(self, populated_tree):
        """Each call starts from an empty accumulator."""
        first = populated_tree.get_nodes_in_range(1, 3, Bound.LOWEST, Bound.HIGHEST, 3)
        second = populated_tree.get_nodes_in_range(1, 3, Bound.LOWEST, Bound.HIGHEST, 3)

        assert first == second == ["x", "a", "c"]

    def test_count_then_list(self, populated_tree):
        count = populated_tree.count_in_range(5, 8, Bound.LOWEST, Bound.HIGHEST)
        result = populated_tree.get_nodes_in_range(
            5, 8, Bound.LOWEST, Bound.HIGHEST, count
        )
        assert result == ["e", "g", "b", "h"]


class TestIteration:
    """Tests for sync and async iteration."""

    def test_full_iteration(self, populated_tree):
        keys = [k for k, v in populated_tree]
        assert keys == [1, 3, 3, 5, 7, 8, 8]

    def test_range_iteration(self, populated_tree):
        result = list(
            populated_tree.iterator((3, Bound.LOWEST), (7, Bound.HIGHEST))
        )
        assert result == [(3, "a"), (3, "c"), (5, "e"), (7, "g")]

    def test_range_iteration_inclusive_pairs(self, populated_tree):
        result = list(populated_tree.iterator((3, "c"), (8, "b")))
        assert result == [(3, "c"), (5, "e"), (7, "g"), (8, "b")]

    def test_open_ended_iteration(self, populated_tree):
        assert [k for k, _ in populated_tree.iterator(start=(7, Bound.LOWEST))] == [7, 8, 8]
        assert [k for k, _ in populated_tree.iterator(end=(3, Bound.HIGHEST))] == [1, 3, 3]

    def test_iterators_are_independent(self, populated_tree):
        first = iter(populated_tree)
        second = iter(populated_tree)

        assert next(first) == (1, "x")
        assert next(first) == (3, "a")
        assert next(second) == (1, "x")

    async def test_async_iteration(self, populated_tree):
        result = [pair async for pair in populated_tree]
        assert result == list(populated_tree)

    async def test_async_range_iteration(self, populated_tree):
        result = []
        async for key, value in populated_tree.async_iterator(
            (8, Bound.LOWEST), (8, Bound.HIGHEST)
        ):
            result.append(value)
        assert result == ["b", "h"]


class TestInvariantChecker:
    """Tests that check_invariants detects corruption."""

    def test_healthy_tree_passes(self, populated_tree):
        populated_tree.check_invariants()

    def test_detects_bad_left_size(self, populated_tree):
        populated_tree._root.left_size += 1

        with pytest.raises(TreeInvariantError, match="left_size"):
            populated_tree.check_invariants()

    def test_detects_bad_height(self, populated_tree):
        populated_tree._root.height += 1

        with pytest.raises(TreeInvariantError, match="height"):
            populated_tree.check_invariants()

    def test_detects_bad_order(self):
        tree = OrderStatisticsTree()
        for key in (1, 2, 3):
            tree.insert(key, "v")
        tree._root.left.key, tree._root.right.key = 3, 1

        with pytest.raises(TreeInvariantError, match="ascending"):
            tree.check_invariants()
