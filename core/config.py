# core/config.py
# Run configuration: defaults, YAML loading, command-line overrides and validation.
from __future__ import annotations
import numpy as np
import yaml
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional
from agents.q_learning import QLearningConfig
from core.errors import ConfigError
from envs.grid import GridWorld, MAX_H, MAX_W, MIN_SIZE, make_grid


@dataclass
class RunConfig:
    # environment
    width: int = 5
    height: int = 5
    start: Optional[List[int]] = None         # None -> (0, 0)
    goal: Optional[List[int]] = None          # None -> bottom-right corner
    obstacles: Optional[List[List[int]]] = None   # None -> default maze
    step_limit: Optional[int] = None          # None -> width*height*4
    step_reward: float = -1.0
    goal_reward: float = 10.0
    # run
    train_episodes: int = 0
    play_episodes: int = 0
    seed: Optional[int] = None                # None -> fresh OS entropy
    log_every: int = 100
    render: bool = False
    render_every: int = 0
    save_path: Optional[str] = None
    load_path: Optional[str] = None
    plot_path: Optional[str] = None
    policy_plot_path: Optional[str] = None
    # Q-learning
    alpha: float = 0.1
    gamma: float = 0.99
    eps_start: float = 1.0
    eps_min: float = 0.05
    eps_decay: float = 0.0025

    def validate(self) -> "RunConfig":
        self._check_types()
        if not (MIN_SIZE <= self.width <= MAX_W and MIN_SIZE <= self.height <= MAX_H):
            raise ConfigError(
                f"Invalid grid size width={self.width}, height={self.height}. "
                f"Use {MIN_SIZE}..{MAX_W} x {MIN_SIZE}..{MAX_H}"
            )
        if not 0.0 < self.alpha <= 1.0:
            raise ConfigError(f"alpha must be in (0, 1], got {self.alpha}")
        if not 0.0 <= self.gamma <= 1.0:
            raise ConfigError(f"gamma must be in [0, 1], got {self.gamma}")
        if not 0.0 <= self.eps_min <= self.eps_start <= 1.0:
            raise ConfigError(f"Need 0 <= eps_min <= eps_start <= 1, got eps_min={self.eps_min}, eps_start={self.eps_start}")
        if self.eps_decay < 0.0:
            raise ConfigError(f"eps_decay must be non-negative, got {self.eps_decay}")
        for name in ("train_episodes", "play_episodes", "render_every"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.log_every < 1:
            raise ConfigError(f"log_every must be positive, got {self.log_every}")
        return self

    def _check_types(self):
        for name in ("width", "height", "train_episodes", "play_episodes", "log_every", "render_every"):
            _require_int(name, getattr(self, name))
        for name in ("step_limit", "seed"):
            if getattr(self, name) is not None:
                _require_int(name, getattr(self, name))
        for name in ("step_reward", "goal_reward", "alpha", "gamma", "eps_start", "eps_min", "eps_decay"):
            _require_number(name, getattr(self, name))
        if not isinstance(self.render, bool):
            raise ConfigError(f"render must be true or false, got {self.render!r}")
        for name in ("save_path", "load_path", "plot_path", "policy_plot_path"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{name} must be a path string, got {value!r}")
        for name in ("start", "goal"):
            if getattr(self, name) is not None:
                _require_pair(name, getattr(self, name))
        if self.obstacles is not None:
            if not isinstance(self.obstacles, (list, tuple)):
                raise ConfigError(f"obstacles must be a list of [x, y] pairs, got {self.obstacles!r}")
            for p in self.obstacles:
                _require_pair("obstacles entry", p)

    def make_rng(self) -> np.random.Generator:
        # Any integer seed is accepted and folded into 32 bits, as an unsigned C seed would be.
        return np.random.default_rng(None if self.seed is None else self.seed % 2**32)

    def build_env(self) -> GridWorld:
        return make_grid(
            self.width, self.height,
            start=tuple(self.start) if self.start is not None else None,
            goal=tuple(self.goal) if self.goal is not None else None,
            obstacles=[tuple(p) for p in self.obstacles] if self.obstacles is not None else None,
            step_limit=self.step_limit,
            step_reward=self.step_reward,
            goal_reward=self.goal_reward,
        )

    def q_learning(self) -> QLearningConfig:
        return QLearningConfig(alpha=self.alpha, gamma=self.gamma, eps_start=self.eps_start,
                               eps_min=self.eps_min, eps_decay=self.eps_decay)


def _require_int(name: str, value: Any):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def _require_number(name: str, value: Any):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")


def _require_pair(name: str, value: Any):
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigError(f"{name} must be an [x, y] pair, got {value!r}")
    for v in value:
        _require_int(name, v)


def config_from_dict(raw: Dict[str, Any] | None) -> RunConfig:
    raw = dict(raw or {})
    known = {f.name for f in fields(RunConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return RunConfig(**raw)


def load_config(path: str) -> RunConfig:
    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    return config_from_dict(raw)


def with_overrides(cfg: RunConfig, overrides: Dict[str, Any]) -> RunConfig:
    """Copy of cfg with every non-None override applied."""
    return replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
