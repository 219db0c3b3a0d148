from __future__ import annotations

import argparse
import logging
from typing import Optional

import gymnasium as gym

import falling_blocks.env  # noqa: F401


logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = gym.make("FallingBlocks-10x20-v0")
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 1
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            logger.info("episode %d ended with %d cleared row(s)", episodes, info["rows_cleared_total"])
            obs, info = env.reset()
            episodes += 1
    env.close()
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--log-level", type=str, default="INFO")
    args = p.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    total = run_random(args.steps, args.seed)
    print(f"Random agent rows cleared: {total:.0f}")


if __name__ == "__main__":  # pragma: no cover
    main()
