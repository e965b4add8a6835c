"""
Performance Benchmark
=====================

Measures headless frame throughput of the game and the Gymnasium wrapper.

Usage:
    python -m tools.benchmark_speed [--steps S] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
import numpy as np

from liftoff.rocket_core.config_loader import load_config
from liftoff.rocket_core.controls import InputFrame
from liftoff.rocket_core.game import LaunchGame
from liftoff.rocket_core.env_gym import RocketLaunchEnv


def _random_action(rng: np.random.Generator) -> np.ndarray:
    """Random key mashing; restart is held rarely."""
    action = (rng.random(3) < (0.5, 0.5, 0.001)).astype(np.int8)
    return action


def benchmark_launch_game(
    num_steps: int = 10000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw LaunchGame without Gym overhead.

    Args:
        num_steps: Number of frames.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = LaunchGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)

    # Warmup
    game.reset(seed=seed)
    for _ in range(10):
        game.step(InputFrame.from_sequence(_random_action(rng)))

    # Benchmark
    game.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        result = game.step(InputFrame.from_sequence(_random_action(rng)))
        if result.landed:
            game.restart()

    elapsed = time.perf_counter() - start

    return {
        "mode": "launch_game",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_env(
    num_steps: int = 10000,
    seed: int = 42
) -> dict:
    """
    Benchmark the Gymnasium environment, observations included.

    Args:
        num_steps: Number of frames.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = RocketLaunchEnv()
    rng = np.random.default_rng(seed)

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        obs, _, terminated, truncated, _ = env.step(_random_action(rng))
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "gym_env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 10000) -> list:
    """Run both benchmarks and print a summary table."""
    results = [
        benchmark_launch_game(num_steps=steps),
        benchmark_env(num_steps=steps),
    ]

    fps = load_config().display.fps

    print("=" * 60)
    print("LIFTOFF PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Steps/s':>12} {'ms/step':>10} {'x realtime':>12}")
    print("-" * 56)

    for r in results:
        realtime = r["steps_per_second"] / fps
        print(f"{r['mode']:<20} {r['steps_per_second']:>12.1f} "
              f"{r['ms_per_step']:>10.3f} {realtime:>12.1f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark headless game speed")
    parser.add_argument("--steps", type=int, default=10000, help="Frames per benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 1000 if args.quick else args.steps
    run_all_benchmarks(steps=steps)

    return 0


if __name__ == "__main__":
    sys.exit(main())
