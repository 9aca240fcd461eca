"""Match lifecycle: creation, rounds, results, completion and cancellation.

Every operation takes a match and returns an updated copy. Validation runs
before the copy is changed, so a failed call leaves the caller's match as it
was.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Mapping, Optional, Sequence

import structlog

from .progression import evaluate_progression, total_scores
from .rounds import ValidationError, build_round, score_results
from .rules_schema import DEFAULT_RULES, RuleSet
from .state import DuplicatePlayerError, Match, utc_now

logger = structlog.get_logger()


def create_match(
    players: Sequence[str],
    winning_points: int,
    *,
    rules: RuleSet = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> Match:
    players = list(players)
    if len(players) < rules.min_players:
        raise ValidationError(f"A match needs at least {rules.min_players} players, got {len(players)}.")
    seen = set()
    for player in players:
        if player in seen:
            raise DuplicatePlayerError(f"Player {player} is listed twice.")
        seen.add(player)
    if isinstance(winning_points, bool) or not isinstance(winning_points, int) or winning_points <= 0:
        raise ValidationError(f"Winning points must be a positive integer, got {winning_points!r}.")

    match = Match(players=players, winning_points=winning_points, created_at=now or utc_now())
    logger.info("match created", match_id=match.id, players=players, winning_points=winning_points)
    return match


def add_player_to_match(match: Match, player: str, *, now: Optional[datetime] = None) -> Match:
    """Add ``player`` starting at the lowest total among the active players."""
    match.ensure_active()
    if player in match.players:
        raise DuplicatePlayerError(f"Player {player} already plays in match {match.id}.")

    totals = total_scores(match)
    active_totals = [totals[p] for p in match.active_players()]
    starting = min(active_totals) if active_totals else 0

    updated = copy.deepcopy(match)
    updated.players.append(player)
    updated.starting_scores[player] = starting
    logger.info("player joined", match_id=match.id, player=player, starting_score=starting)
    return updated


def add_round(match: Match, cards_per_player: int, predictions: Mapping[str, int]) -> Match:
    round_ = build_round(match, cards_per_player, predictions)
    updated = copy.deepcopy(match)
    updated.rounds.append(round_)
    logger.info(
        "round added",
        match_id=match.id,
        round_number=len(updated.rounds),
        cards_per_player=cards_per_player,
        under_total=round_.is_under_total,
    )
    return updated


def update_round_results(
    match: Match,
    round_index: int,
    results: Mapping[str, int],
    *,
    rules: RuleSet = DEFAULT_RULES,
    now: Optional[datetime] = None,
) -> Match:
    match.ensure_active()
    if isinstance(round_index, bool) or not isinstance(round_index, int) or not 0 <= round_index < len(match.rounds):
        raise ValidationError(f"Round index {round_index} is out of range for {len(match.rounds)} rounds.")

    scored = score_results(match.rounds[round_index], results, rules.scoring)
    updated = copy.deepcopy(match)
    updated.rounds[round_index] = scored
    logger.info("results recorded", match_id=match.id, round_number=round_index + 1, scores=scored.player_scores)
    return evaluate_progression(updated, now)


def complete_match(match: Match, *, now: Optional[datetime] = None) -> Match:
    """End the match with whatever standings exist."""
    match.ensure_active()
    updated = copy.deepcopy(match)
    updated.is_active = False
    updated.completed_at = now or utc_now()
    logger.info("match completed", match_id=match.id, winner=updated.winner)
    return updated


def cancel_match(match: Match, *, now: Optional[datetime] = None) -> Match:
    match.ensure_active()
    updated = copy.deepcopy(match)
    updated.is_active = False
    updated.is_cancelled = True
    updated.completed_at = now or utc_now()
    logger.info("match cancelled", match_id=match.id, rounds=len(updated.rounds))
    return updated
