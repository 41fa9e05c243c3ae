
# envs/grid.py
# Deterministic grid world: the agent moves one cell per step, bumping into a wall or the border
# leaves it in place. Reaching the goal ends the episode.
# Actions: UP=0, RIGHT=1, DOWN=2, LEFT=3. Coordinates are (x, y) with y growing downwards.
from __future__ import annotations
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Tuple
from core.errors import ConfigError

UP = 0
RIGHT = 1
DOWN = 2
LEFT = 3
N_ACTIONS = 4

MIN_SIZE = 2
MAX_W = 10
MAX_H = 10

# (dx, dy) per action
MOVES = ((0, -1), (1, 0), (0, 1), (-1, 0))

Pos = Tuple[int, int]

# Small maze used whenever the grid is at least 5x5
DEFAULT_OBSTACLES = ((2, 1), (2, 2), (2, 3), (1, 3))


@dataclass(frozen=True)
class GridWorld:
    width: int
    height: int
    start: Pos = (0, 0)
    goal: Pos = (1, 1)
    obstacles: FrozenSet[Pos] = field(default_factory=frozenset)
    step_limit: int = 100
    step_reward: float = -1.0
    goal_reward: float = 10.0

    def __post_init__(self):
        if not (MIN_SIZE <= self.width <= MAX_W and MIN_SIZE <= self.height <= MAX_H):
            raise ConfigError(
                f"Invalid grid size {self.width}x{self.height}. Use {MIN_SIZE}..{MAX_W}x{MIN_SIZE}..{MAX_H}"
            )
        object.__setattr__(self, "start", _as_pos(self.start))
        object.__setattr__(self, "goal", _as_pos(self.goal))
        object.__setattr__(self, "obstacles", frozenset(_as_pos(p) for p in self.obstacles))
        for p in self.obstacles:
            if not self.in_bounds(*p):
                raise ConfigError(f"Obstacle {p} lies outside the {self.width}x{self.height} grid")
        for name, p in (("start", self.start), ("goal", self.goal)):
            if not self.in_bounds(*p):
                raise ConfigError(f"{name} {p} lies outside the {self.width}x{self.height} grid")
            if p in self.obstacles:
                raise ConfigError(f"{name} {p} is an obstacle")
        if self.step_limit < 1:
            raise ConfigError(f"step_limit must be positive, got {self.step_limit}")

    @property
    def n_states(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_valid(self, x: int, y: int) -> bool:
        """True iff (x, y) is inside the grid and not blocked."""
        return self.in_bounds(x, y) and (x, y) not in self.obstacles

    def state_id(self, x: int, y: int) -> int:
        return y * self.width + x

    def position_of(self, s: int) -> Pos:
        return (s % self.width, s // self.width)

    def step(self, pos: Pos, a: int) -> Tuple[Pos, float, bool]:
        """Apply action a from pos, returning (next_pos, reward, done).

        Moves into a wall or off the grid keep the agent where it is and still cost step_reward.
        """
        if not 0 <= a < N_ACTIONS:
            raise ValueError(f"Unknown action {a}")
        dx, dy = MOVES[a]
        nx, ny = pos[0] + dx, pos[1] + dy
        next_pos = (nx, ny) if self.is_valid(nx, ny) else (pos[0], pos[1])
        done = next_pos == self.goal
        r = self.goal_reward if done else self.step_reward
        return next_pos, r, done

    def free_cells(self) -> Iterable[Pos]:
        for y in range(self.height):
            for x in range(self.width):
                if (x, y) not in self.obstacles:
                    yield (x, y)

    def render(self, agent: Optional[Pos] = None) -> str:
        """ASCII picture of the grid: '#' wall, 'G' goal, 'A' agent, 'S' start, '.' free."""
        rows = []
        for y in range(self.height):
            cells = []
            for x in range(self.width):
                c = "."
                if (x, y) in self.obstacles:
                    c = "#"
                if (x, y) == self.goal:
                    c = "G"
                if agent is not None and (x, y) == tuple(agent):
                    c = "A"
                if (x, y) == self.start and c != "A":
                    c = "S"
                cells.append(c)
            rows.append(" ".join(cells))
        return "\n".join(rows)


def _as_pos(p) -> Pos:
    x, y = p
    return (int(x), int(y))


def make_grid(width: int, height: int,
              start: Optional[Pos] = None,
              goal: Optional[Pos] = None,
              obstacles: Optional[Iterable[Pos]] = None,
              step_limit: Optional[int] = None,
              step_reward: float = -1.0,
              goal_reward: float = 10.0) -> GridWorld:
    """Build a grid with the default layout, overriding whatever is given.

    Default: start top-left, goal bottom-right, the small maze on grids of at least 5x5,
    and an episode cap of four steps per cell.
    """
    if obstacles is None:
        obstacles = DEFAULT_OBSTACLES if (width >= 5 and height >= 5) else ()
    return GridWorld(
        width=width,
        height=height,
        start=start if start is not None else (0, 0),
        goal=goal if goal is not None else (width - 1, height - 1),
        obstacles=frozenset(_as_pos(p) for p in obstacles),
        step_limit=step_limit if step_limit is not None else width * height * 4,
        step_reward=float(step_reward),
        goal_reward=float(goal_reward),
    )
