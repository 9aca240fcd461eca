#!/usr/bin/env python3
"""Simulate many bot matches and summarise player statistics."""

from __future__ import annotations

import argparse
from pathlib import Path
from statistics import mean

import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from bots.bot_arena import BOT_REGISTRY, run_match
from engine.logging import setup_logging
from engine.stats import leaders, player_stats


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Evaluate prediction bots over simulated matches.")
    parser.add_argument("--matches", type=int, default=20, help="Number of matches to simulate.")
    parser.add_argument("--winning-points", type=int, default=50, help="Points at which a player finishes.")
    parser.add_argument("--max-rounds", type=int, default=200, help="Safety cap on rounds per match.")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument(
        "--bots",
        nargs="+",
        default=["random", "cautious", "proportional"],
        choices=BOT_REGISTRY.keys(),
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging()

    seats = [f"{name}-{seat}" for seat, name in enumerate(args.bots)]
    matches = []
    rounds = []
    for idx in range(args.matches):
        bots = {seat: BOT_REGISTRY[name]() for seat, name in zip(seats, args.bots)}
        results = run_match(
            bots,
            winning_points=args.winning_points,
            seed=args.seed + idx,
            max_rounds=args.max_rounds,
        )
        matches.append(results["match"])
        rounds.append(len(results["history"]))

    print(f"Matches played: {len(matches)}")
    print(f"Average rounds per match: {mean(rounds) if rounds else 0.0:.2f}")
    for seat in seats:
        stats = player_stats(matches, seat)
        print(
            f"  {seat}: won={stats.matches_won} lost={stats.matches_lost} "
            f"win_rate={stats.win_rate * 100:.1f}% points={stats.total_points}"
        )
    top = leaders(matches, seats)
    print(f"Most wins: {top.most_wins}  Most losses: {top.most_losses}")


if __name__ == "__main__":
    main()
