"""Tests for nearest-timestamp lookup."""

from datetime import UTC, datetime, timedelta

import pytest

from utils.time_index import InvalidArgumentError, insertion_point, nearest_index


class TestNearestIndex:
    """Test cases for nearest_index."""

    def test_exact_match_returns_index(self):
        """Every element resolves to its own index."""
        times = [100, 200, 300, 400, 500]
        for i, value in enumerate(times):
            assert nearest_index(times, value) == i

    def test_before_first_resolves_to_zero(self):
        assert nearest_index([100, 200, 300], 5) == 0

    def test_after_last_resolves_to_last(self):
        assert nearest_index([100, 200, 300], 10_000) == 2

    def test_picks_closer_neighbour(self):
        times = [0, 10, 20]
        assert nearest_index(times, 12) == 1
        assert nearest_index(times, 18) == 2
        assert nearest_index(times, 1) == 0

    def test_tie_prefers_later_index(self):
        """Halfway between two samples resolves to the upper one."""
        assert nearest_index([0, 10, 20], 15) == 2
        assert nearest_index([0, 10, 20], 5) == 1

    def test_irregular_spacing(self):
        times = [0, 3600, 3700, 10800]
        assert nearest_index(times, 3680) == 2
        assert nearest_index(times, 7000) == 2
        assert nearest_index(times, 7300) == 3

    def test_single_element(self):
        assert nearest_index([42], 0) == 0
        assert nearest_index([42], 42) == 0
        assert nearest_index([42], 99) == 0

    def test_duplicate_keys_return_a_matching_index(self):
        times = [0, 10, 10, 10, 20]
        assert times[nearest_index(times, 10)] == 10

    def test_custom_comparator(self):
        """Works with any keys given a three-way comparator."""
        start = datetime(2024, 6, 1, tzinfo=UTC)
        times = [start + timedelta(hours=i) for i in range(5)]

        def compare(a, b):
            return (a - b).total_seconds()

        target = start + timedelta(hours=2, minutes=20)
        assert nearest_index(times, target, compare) == 2

        target = start + timedelta(hours=2, minutes=30)
        assert nearest_index(times, target, compare) == 3

    def test_empty_series_raises(self):
        with pytest.raises(InvalidArgumentError):
            nearest_index([], 100)

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            nearest_index([], 0)


class TestInsertionPoint:
    """Test cases for the binary search helper."""

    def test_found(self):
        assert insertion_point([1, 3, 5], 3) == (1, True)

    def test_not_found_returns_insertion_index(self):
        assert insertion_point([1, 3, 5], 4) == (2, False)
        assert insertion_point([1, 3, 5], 0) == (0, False)
        assert insertion_point([1, 3, 5], 9) == (3, False)

    def test_empty(self):
        assert insertion_point([], 1) == (0, False)
