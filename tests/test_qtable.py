"""Tests for the dense Q-table."""

import numpy as np
import pytest

from core.errors import DimensionMismatch
from core.qtable import QTable
from envs.grid import make_grid


class TestQTable:
    def test_fresh_table_is_zero(self, maze):
        Q = QTable.for_env(maze)
        assert Q.flat().shape == (25 * 4,)
        assert Q.flat().dtype == np.float32
        assert not Q.flat().any()

    def test_tie_break_picks_action_zero(self, maze):
        Q = QTable.for_env(maze)
        for s in range(maze.n_states):
            assert Q.greedy_action(s) == 0

    def test_tie_break_lowest_index_among_maxima(self):
        Q = QTable(2, 2)
        Q.update(1, 1, 3.0)
        Q.update(1, 3, 3.0)
        assert Q.greedy_action(1) == 1
        assert Q.max_value(1) == 3.0

    def test_greedy_and_max(self):
        Q = QTable(2, 2)
        Q.update(0, 2, -0.5)
        Q.update(0, 0, -1.0)
        Q.update(0, 1, -2.0)
        Q.update(0, 3, -0.75)
        assert Q.greedy_action(0) == 2
        assert Q.max_value(0) == -0.5

    def test_slot_layout(self):
        Q = QTable(3, 2)
        Q[4, 2] = 7.0
        assert Q.flat()[4 * 4 + 2] == 7.0
        assert Q.values[4, 2] == 7.0
        assert Q.value_of(4, 2) == 7.0

    @pytest.mark.parametrize("key", [(-1, 0), (0, -1), (4, 0), (0, 4)])
    def test_out_of_range_rejected(self, key):
        Q = QTable(2, 2)
        with pytest.raises(IndexError):
            Q[key]

    def test_greedy_out_of_range_rejected(self):
        with pytest.raises(IndexError):
            QTable(2, 2).greedy_action(4)

    def test_wrong_value_count(self):
        with pytest.raises(ValueError):
            QTable(2, 2, np.zeros(15))

    def test_copy_is_independent(self):
        Q = QTable(2, 2)
        C = Q.copy()
        C[0, 0] = 1.0
        assert Q[0, 0] == 0.0
        assert Q != C

    def test_check_matches(self, maze):
        QTable(5, 5).check_matches(maze)
        with pytest.raises(DimensionMismatch):
            QTable(4, 5).check_matches(maze)
        with pytest.raises(DimensionMismatch):
            QTable(5, 5).check_matches(make_grid(5, 6))
