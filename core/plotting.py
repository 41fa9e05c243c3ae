# core/plotting.py
from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
from typing import List

from core.qtable import QTable
from core.runner import BatchStats
from envs.grid import GridWorld, MOVES

# ---------- learning curve: batch-averaged return and episode length ----------

def plot_training_curve(stats: List[BatchStats], save_path: str) -> None:
    """Two stacked panels (average return, average length) against episode."""
    episodes = np.array([b.episode for b in stats], dtype=int)
    returns = np.array([b.avg_return for b in stats], dtype=float)
    lengths = np.array([b.avg_length for b in stats], dtype=float)

    fig, axes = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    axes[0].plot(episodes, returns, color="tab:blue")
    axes[0].set_ylabel("Avg return")
    axes[0].grid(True, alpha=0.3)
    axes[1].plot(episodes, lengths, color="tab:green")
    axes[1].set_ylabel("Avg episode length")
    axes[1].set_xlabel("Episode")
    axes[1].grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)

# ---------- greedy policy over the grid ----------

def plot_policy_map(env: GridWorld, Q: QTable, save_path: str) -> None:
    """
    Heatmap of max_a Q[s, a] per cell with an arrow for the greedy action.
    Obstacles are masked out; the goal gets no arrow since episodes end there.
    """
    V = np.array([[Q.max_value(env.state_id(x, y)) for x in range(env.width)]
                  for y in range(env.height)], dtype=float)
    mask = np.zeros_like(V, dtype=bool)
    for (x, y) in env.obstacles:
        mask[y, x] = True
    V = np.ma.masked_array(V, mask=mask)

    fig, ax = plt.subplots(figsize=(1 + env.width, 1 + env.height))
    im = ax.imshow(V, cmap="viridis", origin="upper")
    fig.colorbar(im, ax=ax, label="max Q")

    pi = Q.greedy_policy()
    for (x, y) in env.free_cells():
        if (x, y) == env.goal:
            ax.text(x, y, "G", ha="center", va="center", color="white", fontweight="bold")
            continue
        dx, dy = MOVES[int(pi[env.state_id(x, y)])]
        # imshow puts row 0 at the top, so +dy already points down on screen
        ax.annotate("", xy=(x + 0.3 * dx, y + 0.3 * dy), xytext=(x - 0.3 * dx, y - 0.3 * dy),
                    arrowprops=dict(arrowstyle="->", color="white"))
    sx, sy = env.start
    ax.text(sx - 0.35, sy - 0.3, "S", color="white", fontsize=8)

    ax.set_xticks(range(env.width))
    ax.set_yticks(range(env.height))
    ax.set_title("Greedy policy")
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)
