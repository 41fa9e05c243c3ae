# --- Allow running this file directly (python scripts/run_gridworld.py ...) ---
import os, sys
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
# ------------------------------------------------------------------------------

# scripts/run_gridworld.py
# Train / play a Q-learning agent on the grid world.
#   python scripts/run_gridworld.py --train 10000 --save qtable.bin
#   python scripts/run_gridworld.py --load qtable.bin --render --play 3
#   python scripts/run_gridworld.py --train 5000 --render-every 1000 --seed 42
import argparse
import logging

from core.config import RunConfig, load_config, with_overrides
from core.errors import GridWorldError
from core.persistence import load_qtable, save_qtable
from core.plotting import plot_policy_map, plot_training_curve
from core.qtable import QTable
from core.runner import evaluate, summarize, train
from envs.grid import MAX_H, MAX_W

logger = logging.getLogger("gridworld")

DEFAULT_CONFIG = os.path.join(PROJECT_ROOT, "configs", "gridworld.yaml")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Q-learning Grid World")
    p.add_argument("--config", help="YAML run configuration (default: configs/gridworld.yaml if present)")
    p.add_argument("--train", dest="train_episodes", type=int, metavar="N", help="Train for N episodes")
    p.add_argument("--play", dest="play_episodes", type=int, metavar="N", help="Play greedy policy for N episodes")
    p.add_argument("--render", action="store_true", default=None, help="Render grid during play")
    p.add_argument("--render-every", type=int, metavar="N", help="Render training every N episodes")
    p.add_argument("--save", dest="save_path", metavar="PATH", help="Save Q-table to PATH")
    p.add_argument("--load", dest="load_path", metavar="PATH", help="Load Q-table from PATH")
    p.add_argument("--size", nargs=2, type=int, metavar=("W", "H"), help=f"Grid size (<= {MAX_W} x {MAX_H})")
    p.add_argument("--alpha", type=float, help="Learning rate (default 0.1)")
    p.add_argument("--gamma", type=float, help="Discount (default 0.99)")
    p.add_argument("--eps-start", type=float, help="Epsilon start (default 1.0)")
    p.add_argument("--eps-min", type=float, help="Epsilon min (default 0.05)")
    p.add_argument("--eps-decay", type=float, help="Epsilon decay (default 0.0025)")
    p.add_argument("--seed", type=int, help="RNG seed")
    p.add_argument("--log-every", type=int, metavar="N", help="Log training averages every N episodes")
    p.add_argument("--plot", dest="plot_path", metavar="PATH", help="Save the learning curve to PATH")
    p.add_argument("--policy-plot", dest="policy_plot_path", metavar="PATH", help="Save the greedy policy map to PATH")
    return p


def resolve_config(args: argparse.Namespace) -> RunConfig:
    if args.config:
        cfg = load_config(args.config)
    elif os.path.exists(DEFAULT_CONFIG):
        cfg = load_config(DEFAULT_CONFIG)
    else:
        cfg = RunConfig()
    overrides = {k: v for k, v in vars(args).items() if k not in ("config", "size")}
    if args.size is not None:
        overrides["width"], overrides["height"] = args.size
    return with_overrides(cfg, overrides).validate()


def run(cfg: RunConfig) -> None:
    env = cfg.build_env()
    rng = cfg.make_rng()

    if cfg.load_path:
        Q = load_qtable(cfg.load_path)
        Q.check_matches(env)
    else:
        Q = QTable.for_env(env)

    if cfg.train_episodes > 0:
        history = train(env, Q, cfg.train_episodes, cfg.q_learning(), rng,
                        log_every=cfg.log_every, render_every=cfg.render_every)
        if cfg.save_path:
            save_qtable(cfg.save_path, Q)
        if cfg.plot_path:
            if history:
                plot_training_curve(history, cfg.plot_path)
                logger.info("Saved learning curve to %s", cfg.plot_path)
            else:
                logger.warning("Fewer than %d episodes trained, no learning curve written", cfg.log_every)

    if cfg.play_episodes > 0:
        results = evaluate(env, Q, cfg.play_episodes, render=cfg.render)
        stats = summarize(results)
        logger.info("Greedy play: mean return %.2f | mean steps %.1f | reached goal %.0f%%",
                    stats["mean_return"], stats["mean_steps"], 100 * stats["success_rate"])

    if cfg.policy_plot_path:
        plot_policy_map(env, Q, cfg.policy_plot_path)
        logger.info("Saved policy map to %s", cfg.policy_plot_path)

    if cfg.train_episodes == 0 and cfg.play_episodes == 0:
        print("Nothing to do. Try --train 10000 --save q.bin or --load q.bin --play 5 --render")


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = build_parser().parse_args(argv)
    try:
        run(resolve_config(args))
    except GridWorldError as e:
        logger.error("%s", e)
        return 1
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
