"""Tests for the grid-world transition model."""

import pytest

from core.errors import ConfigError
from envs.grid import (DEFAULT_OBSTACLES, DOWN, LEFT, N_ACTIONS, RIGHT, UP,
                       GridWorld, make_grid)


class TestLayout:
    """Default layout and construction checks."""

    def test_default_maze(self, maze):
        assert (maze.width, maze.height) == (5, 5)
        assert maze.start == (0, 0)
        assert maze.goal == (4, 4)
        assert maze.obstacles == frozenset(DEFAULT_OBSTACLES)
        assert maze.step_limit == 100
        assert maze.step_reward == -1.0
        assert maze.goal_reward == 10.0

    def test_small_grid_has_no_obstacles(self):
        env = make_grid(4, 6)
        assert env.obstacles == frozenset()
        assert env.goal == (3, 5)
        assert env.step_limit == 4 * 6 * 4

    @pytest.mark.parametrize("size", [(1, 5), (5, 1), (11, 5), (5, 11), (0, 0)])
    def test_size_out_of_bounds(self, size):
        with pytest.raises(ConfigError):
            make_grid(*size)

    def test_start_on_obstacle_rejected(self):
        with pytest.raises(ConfigError):
            make_grid(5, 5, start=(2, 1))

    def test_goal_out_of_bounds_rejected(self):
        with pytest.raises(ConfigError):
            make_grid(5, 5, goal=(5, 4))

    def test_obstacle_out_of_bounds_rejected(self):
        with pytest.raises(ConfigError):
            make_grid(3, 3, obstacles=[(3, 0)])

    def test_immutable(self, maze):
        with pytest.raises(AttributeError):
            maze.width = 7


class TestStateIds:
    def test_row_major(self, maze):
        assert maze.state_id(0, 0) == 0
        assert maze.state_id(4, 0) == 4
        assert maze.state_id(0, 1) == 5
        assert maze.state_id(4, 4) == 24

    def test_inverse(self):
        env = make_grid(7, 3)
        for s in range(env.n_states):
            assert env.state_id(*env.position_of(s)) == s


class TestStep:
    """Transition function."""

    def test_action_deltas(self):
        env = make_grid(5, 5, obstacles=[])
        assert env.step((2, 2), UP)[0] == (2, 1)
        assert env.step((2, 2), RIGHT)[0] == (3, 2)
        assert env.step((2, 2), DOWN)[0] == (2, 3)
        assert env.step((2, 2), LEFT)[0] == (1, 2)

    def test_bump_into_border_stays(self, maze):
        pos, r, done = maze.step((0, 0), UP)
        assert pos == (0, 0)
        assert r == maze.step_reward
        assert not done

    def test_bump_into_wall_stays(self, maze):
        pos, r, done = maze.step((1, 1), RIGHT)   # (2,1) is a wall
        assert pos == (1, 1)
        assert r == -1.0
        assert not done

    def test_reaching_goal(self, maze):
        pos, r, done = maze.step((4, 3), DOWN)
        assert pos == (4, 4)
        assert r == 10.0
        assert done

    def test_unknown_action(self, maze):
        with pytest.raises(ValueError):
            maze.step((0, 0), 4)

    def test_transition_totality(self, maze):
        for cell in maze.free_cells():
            for a in range(N_ACTIONS):
                pos, _, _ = maze.step(cell, a)
                assert maze.is_valid(*pos)
                assert pos == cell or abs(pos[0] - cell[0]) + abs(pos[1] - cell[1]) == 1

    def test_is_valid(self, maze):
        assert maze.is_valid(0, 0)
        assert not maze.is_valid(2, 2)
        assert not maze.is_valid(-1, 0)
        assert not maze.is_valid(0, 5)


class TestRender:
    def test_markers(self, maze):
        rows = maze.render((1, 0)).splitlines()
        assert rows[0] == "S A . . ."
        assert rows[1] == ". . # . ."
        assert rows[3] == ". # # . ."
        assert rows[4] == ". . . . G"

    def test_agent_on_start(self, maze):
        assert maze.render((0, 0)).splitlines()[0].startswith("A ")

    def test_custom_grid(self):
        env = GridWorld(width=2, height=2, start=(0, 0), goal=(1, 0))
        assert env.render() == "S G\n. ."
