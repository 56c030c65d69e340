from __future__ import annotations

import argparse
import random
from typing import Optional

import gymnasium as gym

import tetromino_engine.env  # ensure registration


def run_random(steps: int = 200, seed: Optional[int] = None, gravity_every: int = 1) -> float:
    env = gym.make("Tetromino-10x20-v0", gravity_every=gravity_every)
    rng = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 1
    for _ in range(steps):
        action = rng.randrange(env.action_space.n)
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            obs, info = env.reset()
            episodes += 1
    env.close()
    print(f"Random agent total reward: {total_reward:.2f} over {episodes} episode(s)")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Drive the tetromino engine with uniform random actions.")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--gravity-every", type=int, default=1)
    return p


def main(argv: Optional[list] = None) -> None:
    args = build_parser().parse_args(argv)
    run_random(steps=args.steps, seed=args.seed, gravity_every=args.gravity_every)


if __name__ == "__main__":  # pragma: no cover
    main()
