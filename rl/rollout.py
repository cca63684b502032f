"""
Headless rollouts of scripted policies on the platformer environment.
Reports return, distance, airborne time and score per policy and seed, and
writes the rows to a CSV (under ROLLOUT_CONFIG["log_dir"] by default).
"""

import os
import csv
import argparse
from typing import Dict, List, Optional

import numpy as np

from game.kaboom import PlatformerEnv
from rl.configs.platformer_config import ENV_CONFIG, POLICY_CONFIGS, ROLLOUT_CONFIG


def make_policy(name: str, rng: np.random.Generator, env: PlatformerEnv):
    """Return a callable obs -> action for a policy in POLICY_CONFIGS"""
    if name not in POLICY_CONFIGS:
        raise ValueError(f"Unknown policy: {name}")
    params = POLICY_CONFIGS[name]

    if name == "random":
        return lambda obs: env.action_space.sample()

    p_left, p_right = params["p_left"], params["p_right"]
    p_stay = max(0.0, 1.0 - p_left - p_right)
    probs = np.array([p_stay, p_left, p_right])
    probs = probs / probs.sum()

    def _act(obs):
        move = int(rng.choice(3, p=probs))
        jump = int(rng.random() < params["p_jump"])
        return np.array([move, jump], dtype=np.int64)

    return _act


def run_episodes(
    policy: str = "random",
    n_episodes: int = 5,
    seed: int = 42,
    env_config: Optional[Dict] = None,
) -> Dict[str, float]:
    """Roll out a policy and return aggregated statistics"""
    env = PlatformerEnv(**(env_config or ENV_CONFIG))
    env.action_space.seed(seed)
    rng = np.random.default_rng(seed)
    act = make_policy(policy, rng, env)

    returns: List[float] = []
    distances: List[float] = []
    airborne: List[float] = []
    scores: List[float] = []

    for ep in range(n_episodes):
        obs, info = env.reset(seed=seed + ep)
        terminated = truncated = False
        total = 0.0
        air = 0
        while not (terminated or truncated):
            obs, reward, terminated, truncated, info = env.step(act(obs))
            total += reward
            if not info["grounded"]:
                air += 1
        returns.append(total)
        distances.append(info["distance"])
        airborne.append(air / max(1, info["step"]))
        scores.append(info["score"])

    env.close()

    return {
        "policy": policy,
        "seed": seed,
        "n_episodes": n_episodes,
        "mean_return": float(np.mean(returns)),
        "std_return": float(np.std(returns)),
        "mean_distance": float(np.mean(distances)),
        "airborne_fraction": float(np.mean(airborne)),
        "mean_score": float(np.mean(scores)),
    }


def run_policies(
    policies: List[str],
    seeds: Optional[List[int]] = None,
    n_episodes: int = ROLLOUT_CONFIG["n_episodes"],
    env_config: Optional[Dict] = None,
) -> List[Dict]:
    """One result row per (policy, seed); seeds default to ROLLOUT_CONFIG["seeds"]"""
    if seeds is None:
        seeds = ROLLOUT_CONFIG["seeds"]
    results = []
    for name in policies:
        for seed in seeds:
            results.append(run_episodes(name, n_episodes=n_episodes, seed=seed, env_config=env_config))
    return results


def default_csv_path() -> str:
    return os.path.join(ROLLOUT_CONFIG["log_dir"], "rollouts.csv")


def write_csv(results: List[Dict], path: str):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(results[0].keys()))
        writer.writeheader()
        writer.writerows(results)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Run headless platformer rollouts")
    parser.add_argument(
        "--policy",
        type=str,
        default="all",
        choices=["all"] + sorted(POLICY_CONFIGS),
        help="Policy to roll out (default: all)",
    )
    parser.add_argument(
        "--n-episodes",
        type=int,
        default=ROLLOUT_CONFIG["n_episodes"],
        help=f"Episodes per policy and seed (default: {ROLLOUT_CONFIG['n_episodes']})",
    )
    parser.add_argument(
        "--seeds",
        type=int,
        nargs="+",
        default=ROLLOUT_CONFIG["seeds"],
        help=f"Random seeds (default: {ROLLOUT_CONFIG['seeds']})",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default=default_csv_path(),
        help="CSV file for the results (default: <log_dir>/rollouts.csv)",
    )
    args = parser.parse_args(argv)

    policies = sorted(POLICY_CONFIGS) if args.policy == "all" else [args.policy]

    print(f"\n{'='*60}")
    print(f"Rolling out {len(policies)} policies x {len(args.seeds)} seeds x {args.n_episodes} episodes")
    print(f"{'='*60}")
    results = run_policies(policies, seeds=args.seeds, n_episodes=args.n_episodes)
    for res in results:
        print(f"  {res['policy']:10} seed {res['seed']:<5}"
              f" | return {res['mean_return']:+.3f} +/- {res['std_return']:.3f}"
              f" | distance {res['mean_distance']:7.1f}"
              f" | airborne {res['airborne_fraction']:.0%}"
              f" | score {res['mean_score']:.0f}")

    write_csv(results, args.csv)
    print(f"\nResults saved to {args.csv}")
    return results


if __name__ == "__main__":
    main()
