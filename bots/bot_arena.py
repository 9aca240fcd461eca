"""Simulated matches between prediction bots."""

from __future__ import annotations

import argparse
import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from engine.game import add_round, complete_match, create_match, update_round_results
from engine.progression import total_scores
from engine.rounds import default_cards_for_round
from engine.rules_schema import DEFAULT_RULES, RuleSet
from engine.state import Match

from .base import PredictionStrategy
from .baseline_cautious import CautiousBot
from .baseline_proportional import ProportionalBot
from .random_bot import RandomBot

BOT_REGISTRY: Dict[str, type[PredictionStrategy]] = {
    "random": RandomBot,
    "cautious": CautiousBot,
    "proportional": ProportionalBot,
}


def collect_predictions(
    match: Match,
    bots: Mapping[str, PredictionStrategy],
    cards_per_player: int,
) -> Dict[str, int]:
    active = match.active_players()
    predictions: Dict[str, int] = {}
    for index, player in enumerate(active):
        predictions[player] = bots[player].predict(
            match,
            player,
            cards_per_player,
            dict(predictions),
            is_last=index == len(active) - 1,
        )
    return predictions


def deal_results(players: Sequence[str], cards_per_player: int, rng: random.Random) -> Dict[str, int]:
    """Hand every contested hand to a random player."""
    results = {player: 0 for player in players}
    for _ in range(cards_per_player):
        results[rng.choice(list(players))] += 1
    return results


def run_match(
    bots: Mapping[str, PredictionStrategy],
    *,
    winning_points: int = 50,
    seed: Optional[int] = None,
    max_rounds: int = 200,
    rules: RuleSet = DEFAULT_RULES,
) -> dict:
    rng = random.Random(seed)
    match = create_match(list(bots), winning_points, rules=rules)
    for bot in bots.values():
        bot.on_match_start(match)

    history: List[dict] = []
    while match.is_active and len(match.rounds) < max_rounds:
        cards = default_cards_for_round(len(match.rounds), rules.max_default_cards)
        predictions = collect_predictions(match, bots, cards)
        match = add_round(match, cards, predictions)
        results = deal_results(list(predictions), cards, rng)
        match = update_round_results(match, len(match.rounds) - 1, results, rules=rules)
        history.append(
            {
                "cards_per_player": cards,
                "predictions": predictions,
                "results": results,
                "scores": dict(match.rounds[-1].player_scores),
            }
        )

    if match.is_active:
        match = complete_match(match)

    return {
        "match": match,
        "scores": total_scores(match),
        "losers": list(match.losers),
        "winner": match.winner,
        "history": history,
    }


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run a simulated prediction match.")
    parser.add_argument(
        "--bots",
        nargs="+",
        default=["random", "cautious", "proportional"],
        choices=BOT_REGISTRY.keys(),
        help="One bot per seat.",
    )
    parser.add_argument("--winning-points", type=int, default=50)
    parser.add_argument("--max-rounds", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args(argv)

    bots = {f"{name}-{seat}": BOT_REGISTRY[name]() for seat, name in enumerate(args.bots)}
    results = run_match(bots, winning_points=args.winning_points, seed=args.seed, max_rounds=args.max_rounds)

    print(f"Rounds played: {len(results['history'])}")
    print(f"Finish order: {results['losers']}")
    print(f"Winner: {results['winner']}")
    print(f"Scores: {results['scores']}")


if __name__ == "__main__":
    main()
