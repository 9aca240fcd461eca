#!/usr/bin/env python3
"""Print the standings of a stored match."""

from __future__ import annotations

import argparse
from pathlib import Path

import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from engine.encode import DecodeError
from engine.progression import ranked_standings
from engine.rules_schema import DEFAULT_RULES, load_rules
from engine.storage import load_match_file


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show standings for a match JSON file.")
    parser.add_argument("path", help="Path to the stored match.")
    parser.add_argument("--rules", default=None, help="Optional rules JSON file.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    rules = load_rules(args.rules) if args.rules else DEFAULT_RULES
    try:
        match = load_match_file(args.path)
    except (OSError, DecodeError) as exc:
        raise SystemExit(f"Cannot load {args.path}: {exc}")

    print(f"Match {match.id} ({match.status}) - {match.winning_points} points to finish")
    print(f"Rounds: {len(match.rounds)}")
    for rank, standing in enumerate(ranked_standings(match, rules.near_win_ratio), start=1):
        flag = " *" if standing.near_win else ""
        print(f"  {rank}. {standing.player:<20} {standing.total:>5}  {standing.status}{flag}")
    if match.winner:
        print(f"Winner: {match.winner}")


if __name__ == "__main__":
    main()
