# core/qtable.py
# Dense tabular action-value function Q[s, a] for a W x H grid with 4 actions.
# Storage is a flat float32 array laid out row-major by state, then action (slot = s*A + a);
# this is also the on-disk layout used by core.persistence.
from __future__ import annotations
import numpy as np
from typing import Tuple
from core.errors import DimensionMismatch
from envs.grid import GridWorld, N_ACTIONS


class QTable:
    def __init__(self, width: int, height: int, values: np.ndarray | None = None):
        self.width, self.height = int(width), int(height)
        self.A = N_ACTIONS
        n = self.width * self.height * self.A
        if values is None:
            self.q = np.zeros(n, dtype=np.float32)
        else:
            values = np.asarray(values, dtype=np.float32).reshape(-1)
            if values.size != n:
                raise ValueError(f"Expected {n} Q-values for a {self.width}x{self.height} table, got {values.size}")
            self.q = values.copy()

    @classmethod
    def for_env(cls, env: GridWorld) -> "QTable":
        """All-zero table sized for env."""
        return cls(env.width, env.height)

    @property
    def S(self) -> int:
        return self.width * self.height

    @property
    def values(self) -> np.ndarray:
        """(S, A) view onto the flat storage."""
        return self.q.reshape(self.S, self.A)

    def flat(self) -> np.ndarray:
        return self.q

    def _slot(self, s: int, a: int) -> int:
        if not (0 <= s < self.S and 0 <= a < self.A):
            raise IndexError(f"(state={s}, action={a}) outside a table of {self.S} states x {self.A} actions")
        return s * self.A + a

    def __getitem__(self, key: Tuple[int, int]) -> float:
        s, a = key
        return float(self.q[self._slot(s, a)])

    def __setitem__(self, key: Tuple[int, int], value: float):
        s, a = key
        self.q[self._slot(s, a)] = value

    def value_of(self, s: int, a: int) -> float:
        return self[s, a]

    def update(self, s: int, a: int, new_value: float):
        """Overwrite Q[s, a]."""
        self[s, a] = new_value

    def greedy_action(self, s: int) -> int:
        """Action with the largest value; ties go to the lowest action index."""
        self._slot(s, 0)
        # np.argmax returns the first maximal index
        return int(np.argmax(self.q[s * self.A:(s + 1) * self.A]))

    def max_value(self, s: int) -> float:
        self._slot(s, 0)
        return float(np.max(self.q[s * self.A:(s + 1) * self.A]))

    def greedy_policy(self) -> np.ndarray:
        """Greedy action for every state, shape (S,)."""
        return np.argmax(self.values, axis=1)

    def check_matches(self, env: GridWorld):
        if (self.width, self.height) != (env.width, env.height):
            raise DimensionMismatch(
                f"Loaded table size {self.width}x{self.height} doesn't match env {env.width}x{env.height}"
            )

    def copy(self) -> "QTable":
        return QTable(self.width, self.height, self.q)

    def __eq__(self, other) -> bool:
        if not isinstance(other, QTable):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) and np.array_equal(self.q, other.q)

    __hash__ = None

    def __repr__(self) -> str:
        return f"QTable({self.width}x{self.height}, A={self.A})"
