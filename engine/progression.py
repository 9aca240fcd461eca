"""Totals, finishing order and standings for a match."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Dict, List, Optional

import structlog

from .state import Match, Round, utc_now

logger = structlog.get_logger()


class PlayerStatus(Enum):
    WINNER = auto()
    FINISHED = auto()
    ACTIVE = auto()
    LAST_PLACE = auto()

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Standing:
    player: str
    total: int
    status: PlayerStatus
    near_win: bool = False


def total_scores(match: Match) -> Dict[str, int]:
    totals = {player: match.starting_scores.get(player, 0) for player in match.players}
    for round_ in match.rounds:
        for player, score in round_.player_scores.items():
            totals[player] = totals.get(player, 0) + score
    return totals


def _last_scored_round(match: Match) -> Optional[Round]:
    for round_ in reversed(match.rounds):
        if not round_.awaiting_results:
            return round_
    return None


def evaluate_progression(match: Match, now: Optional[datetime] = None) -> Match:
    """Move players who reached the winning points into ``losers``.

    Players crossing the threshold in the same round are ordered by their
    score in that round (highest first), then by their seat in ``players``.
    Appending stops once a single active player is left; that player is the
    winner and the match is completed. Mutates and returns ``match``.
    """
    if not match.is_active:
        return match

    totals = total_scores(match)
    active = match.active_players()
    qualifiers = [player for player in active if totals[player] >= match.winning_points]
    if not qualifiers:
        return match

    latest = _last_scored_round(match)
    deltas = latest.player_scores if latest is not None else {}
    seat = {player: index for index, player in enumerate(match.players)}
    qualifiers.sort(key=lambda player: (-deltas.get(player, 0), seat[player]))

    remaining = len(active)
    for player in qualifiers:
        if remaining <= 1:
            break
        match.losers.append(player)
        remaining -= 1
        logger.info("player finished", match_id=match.id, player=player, total=totals[player])

    still_active = match.active_players()
    if len(still_active) == 1:
        match.winner = still_active[0]
        match.is_active = False
        match.completed_at = now or utc_now()
        logger.info("winner decided", match_id=match.id, winner=match.winner)
    return match


def near_winning_players(match: Match, ratio: float = 0.8) -> List[str]:
    totals = total_scores(match)
    threshold = ratio * match.winning_points
    return [player for player in match.active_players() if totals[player] >= threshold]


def player_status(match: Match, player: str) -> PlayerStatus:
    if match.winner == player:
        return PlayerStatus.WINNER
    if player in match.losers:
        if len(match.losers) == len(match.players) and match.losers[-1] == player:
            return PlayerStatus.LAST_PLACE
        return PlayerStatus.FINISHED
    return PlayerStatus.ACTIVE


def ranked_standings(match: Match, near_win_ratio: float = 0.8) -> List[Standing]:
    """Finished players in arrival order, then active players by total."""
    totals = total_scores(match)
    near = set(near_winning_players(match, near_win_ratio)) if match.is_active else set()
    everyone_finished = len(match.losers) == len(match.players)

    finished = match.losers[:-1] if everyone_finished else list(match.losers)
    # sorted() is stable, so ties keep join order.
    active = sorted(match.active_players(), key=lambda player: -totals[player])
    order = finished + active
    if everyone_finished:
        order.append(match.losers[-1])

    return [
        Standing(
            player=player,
            total=totals[player],
            status=player_status(match, player),
            near_win=player in near,
        )
        for player in order
    ]
