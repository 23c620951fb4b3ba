"""
Tests for utils/math_utils.py - grid and position helpers.
"""

import os
import random
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from utils import math_utils


class TestWrapPosition:
    """Toroidal wrapping keeps every coordinate on the board."""

    @pytest.mark.parametrize("position, expected", [
        ((-1, 0), (19, 0)),
        ((20, 5), (0, 5)),
        ((5, -1), (5, 19)),
        ((5, 20), (5, 0)),
        ((-21, 41), (19, 1)),
    ])
    def test_wraps_out_of_bounds(self, position, expected):
        """Out-of-bounds positions come back in from the opposite edge."""
        assert math_utils.wrap_position(position, 20, 20) == expected

    def test_inside_positions_unchanged(self):
        """Positions already on the board are returned as-is."""
        assert math_utils.wrap_position((3, 7), 20, 20) == (3, 7)

    def test_result_always_in_range(self):
        """Any integer input lands inside [0, w) x [0, h)."""
        for x in range(-50, 50, 7):
            for y in range(-50, 50, 11):
                wx, wy = math_utils.wrap_position((x, y), 13, 9)
                assert 0 <= wx < 13
                assert 0 <= wy < 9


class TestDistances:
    """Tests for equality, Manhattan distance and Chebyshev range."""

    def test_positions_equal(self):
        """Equality compares both components."""
        assert math_utils.positions_equal((1, 2), (1, 2))
        assert not math_utils.positions_equal((1, 2), (2, 1))

    def test_manhattan_distance(self):
        """Manhattan distance sums absolute differences."""
        assert math_utils.manhattan_distance((0, 0), (3, 4)) == 7
        assert math_utils.manhattan_distance((5, 5), (2, 9)) == 7

    def test_in_range_uses_chebyshev_box(self):
        """Diagonal neighbours are inside radius 1."""
        assert math_utils.is_in_range((10, 10), (11, 11), 1)
        assert math_utils.is_in_range((10, 10), (9, 10), 1)
        assert math_utils.is_in_range((10, 10), (10, 10), 0)

    def test_out_of_range(self):
        """Two cells away is outside radius 1."""
        assert not math_utils.is_in_range((10, 10), (12, 10), 1)
        assert not math_utils.is_in_range((10, 10), (11, 12), 1)


class TestRandomHelpers:
    """Tests for the helpers that draw from a random source."""

    def test_random_position_on_board(self):
        """Random positions stay on the board."""
        rng = random.Random(7)
        for _ in range(200):
            x, y = math_utils.random_position(4, 3, rng)
            assert 0 <= x < 4
            assert 0 <= y < 3

    def test_random_position_is_reproducible_with_seed(self):
        """The same seed yields the same sequence."""
        first = [math_utils.random_position(20, 20, random.Random(99)) for _ in range(3)]
        second = [math_utils.random_position(20, 20, random.Random(99)) for _ in range(3)]
        assert first == second

    def test_should_happen_extremes(self):
        """Probability 0 never fires, probability 1 always does."""
        rng = random.Random(5)
        assert not any(math_utils.should_happen(0.0, rng) for _ in range(100))
        assert all(math_utils.should_happen(1.0, rng) for _ in range(100))


class TestBoardHelpers:
    def test_board_center(self):
        """Center of a 20x20 board is (10, 10)."""
        assert math_utils.board_center(20, 20) == (10, 10)
        assert math_utils.board_center(5, 3) == (2, 1)

    def test_total_cells(self):
        """Total cells is width times height."""
        assert math_utils.total_cells(20, 15) == 300
