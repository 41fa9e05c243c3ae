
# agents/q_learning.py
# Tabular Q-learning with epsilon-greedy exploration and exponentially decaying epsilon.
from __future__ import annotations
import math
import numpy as np
from dataclasses import dataclass
from core.qtable import QTable


@dataclass
class QLearningConfig:
    alpha: float = 0.1           # learning rate
    gamma: float = 0.99          # discount
    eps_start: float = 1.0
    eps_min: float = 0.05
    eps_decay: float = 0.0025    # rate of exp(-decay * episode), tuned for ~10k episodes


def epsilon_at(episode: int, eps_start: float, eps_min: float, eps_decay: float) -> float:
    """Exploration rate for a 1-based episode index: max(eps_min, eps_start * exp(-eps_decay * episode))."""
    return max(eps_min, eps_start * math.exp(-eps_decay * episode))


def select_action(Q: QTable, s: int, epsilon: float, rng: np.random.Generator) -> int:
    # One uniform draw decides explore vs exploit; a second draw only when exploring.
    if rng.random() < epsilon:
        return int(rng.integers(Q.A))
    return Q.greedy_action(s)


class QLearningAgent:
    def __init__(self, Q: QTable, cfg: QLearningConfig, rng: np.random.Generator):
        self.Q = Q
        self.cfg = cfg
        self.rng = rng
        self.epsilon = cfg.eps_start

    def begin_episode(self, episode: int):
        self.epsilon = epsilon_at(episode, self.cfg.eps_start, self.cfg.eps_min, self.cfg.eps_decay)

    def act(self, s: int) -> int:
        return select_action(self.Q, s, self.epsilon, self.rng)

    def update(self, s: int, a: int, s_next: int, r: float, done: bool):
        # Q-learning target: r + gamma * max_a' Q[s_next, a'], no bootstrap past the goal
        target = r + (0.0 if done else self.cfg.gamma * self.Q.max_value(s_next))
        q_sa = self.Q[s, a]
        self.Q[s, a] = q_sa + self.cfg.alpha * (target - q_sa)
