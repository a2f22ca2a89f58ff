from __future__ import annotations

import argparse
import logging
import random
from typing import Optional

import gymnasium as gym
import numpy as np

# Ensure envs are registered
import shape_puzzle_rl.env  # noqa: F401


logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    """Play `steps` uniformly random legal actions, restarting on game over; return total reward."""
    rng = random.Random(seed)
    env = gym.make("ShapePuzzle-v0")
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    games = 0
    for _ in range(steps):
        valid = np.argwhere(info["action_mask"])
        if len(valid):
            action = tuple(int(v) for v in valid[rng.randrange(len(valid))])
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            games += 1
            logger.info(f"game {games} finished with score {info['score']}")
            obs, info = env.reset()
    env.close()
    logger.info(f"random agent total reward: {total_reward:.2f} over {games} finished games")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
