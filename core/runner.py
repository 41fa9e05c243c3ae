
# core/runner.py
# Episode drivers: Q-learning training, greedy evaluation, and a random-policy baseline.
from __future__ import annotations
import logging
import numpy as np
from dataclasses import dataclass
from typing import Callable, List
from agents.q_learning import QLearningAgent, QLearningConfig
from core.qtable import QTable
from envs.grid import GridWorld, N_ACTIONS

logger = logging.getLogger(__name__)


@dataclass
class EpisodeResult:
    total_return: float
    steps: int
    reached_goal: bool


@dataclass
class BatchStats:
    episode: int          # last episode of the batch
    avg_length: float
    avg_return: float
    epsilon: float        # epsilon used in that last episode


def train(env: GridWorld, Q: QTable, episodes: int, cfg: QLearningConfig, rng: np.random.Generator,
          log_every: int = 100, render_every: int = 0,
          render_fn: Callable[[str], None] = print) -> List[BatchStats]:
    """Train Q in place for `episodes` episodes.

    Episode indices start at 1, which is also the index fed to the epsilon schedule.
    Every `log_every` episodes the average episode length and return over that batch are logged
    and recorded, then the accumulators start over. Returns the recorded batches.
    """
    Q.check_matches(env)
    agent = QLearningAgent(Q, cfg, rng)
    history = []
    sum_len, sum_ret = 0.0, 0.0

    for ep in range(1, episodes + 1):
        agent.begin_episode(ep)
        show = render_every > 0 and ep % render_every == 0
        pos = env.start
        steps, ret = 0, 0.0
        while True:
            if show:
                render_fn(f"\n[Episode {ep} | eps={agent.epsilon:.3f}]\n{env.render(pos)}")
            s = env.state_id(*pos)
            a = agent.act(s)
            next_pos, r, done = env.step(pos, a)
            agent.update(s, a, env.state_id(*next_pos), r, done)
            ret += r
            pos = next_pos
            steps += 1
            if done or steps >= env.step_limit:
                break

        sum_len += steps
        sum_ret += ret
        if ep % log_every == 0:
            batch = BatchStats(ep, sum_len / log_every, sum_ret / log_every, agent.epsilon)
            logger.info("Episode %5d | avg_len: %6.2f | avg_return: %7.3f",
                        batch.episode, batch.avg_length, batch.avg_return)
            history.append(batch)
            sum_len, sum_ret = 0.0, 0.0
    return history


def evaluate(env: GridWorld, Q: QTable, episodes: int, render: bool = False,
             render_fn: Callable[[str], None] = print) -> List[EpisodeResult]:
    """Replay the greedy policy (epsilon = 0). Q is only read."""
    Q.check_matches(env)
    results = []
    for ep in range(1, episodes + 1):
        if render:
            render_fn(f"\n[Play {ep}]")
        pos = env.start
        steps, ret, done = 0, 0.0, False
        while True:
            if render:
                render_fn(env.render(pos) + "\n")
            a = Q.greedy_action(env.state_id(*pos))
            pos, r, done = env.step(pos, a)
            ret += r
            steps += 1
            if done or steps >= env.step_limit:
                break
        logger.info("Return: %.2f | Steps: %d", ret, steps)
        results.append(EpisodeResult(ret, steps, done))
    return results


def random_policy_returns(env: GridWorld, episodes: int, rng: np.random.Generator) -> List[EpisodeResult]:
    """Uniformly random actions under the same termination rule; a baseline for the greedy policy."""
    results = []
    for _ in range(episodes):
        pos = env.start
        steps, ret, done = 0, 0.0, False
        while True:
            pos, r, done = env.step(pos, int(rng.integers(N_ACTIONS)))
            ret += r
            steps += 1
            if done or steps >= env.step_limit:
                break
        results.append(EpisodeResult(ret, steps, done))
    return results


def summarize(results: List[EpisodeResult]) -> dict:
    returns = np.array([r.total_return for r in results], dtype=float)
    lengths = np.array([r.steps for r in results], dtype=float)
    return {
        "episodes": len(results),
        "mean_return": float(returns.mean()) if len(results) else float("nan"),
        "mean_steps": float(lengths.mean()) if len(results) else float("nan"),
        "success_rate": float(np.mean([r.reached_goal for r in results])) if len(results) else float("nan"),
    }
