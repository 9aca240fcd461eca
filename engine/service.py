"""Service layer and read models for presentation code."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence

import structlog

from . import game
from .progression import ranked_standings, total_scores
from .rounds import RoundError, default_cards_for_round
from .rules_schema import DEFAULT_RULES, RuleSet
from .scoring import ScoringError
from .state import Match, MatchError, MatchStatus, Round
from .stats import PlayerStats, player_stats
from .storage import MatchRepository

logger = structlog.get_logger()


@dataclass
class RoundView:
    id: str
    number: int
    cards_per_player: int
    predictions: dict[str, int]
    results: dict[str, int]
    scores: dict[str, int]
    awaiting_results: bool
    prediction_total: int
    under_total: bool


@dataclass
class StandingView:
    rank: int
    player: str
    total: int
    status: str
    near_win: bool


@dataclass
class MatchView:
    id: str
    status: str
    players: list[str]
    winning_points: int
    rounds: list[RoundView]
    losers: list[str]
    winner: Optional[str]
    totals: dict[str, int]
    active_players: list[str]
    standings: list[StandingView]
    pending_round_index: Optional[int]
    next_round_cards: int
    under_total: bool
    created_at: str
    completed_at: Optional[str]


class MatchService:
    """Facade over the lifecycle functions for UI consumers.

    Each mutation loads the match, applies one operation and saves the
    result while holding the lock for that match id.
    """

    def __init__(self, repository: MatchRepository, rules: RuleSet = DEFAULT_RULES) -> None:
        self.repository = repository
        self.rules = rules
        # One lock per match id, kept for the lifetime of the service.
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # Lifecycle ---------------------------------------------------------

    def create_match(self, players: Sequence[str], winning_points: int) -> MatchView:
        match = game.create_match(players, winning_points, rules=self.rules)
        self.repository.save(match)
        return self.build_view(match)

    def add_player(self, match_id: str, player: str) -> MatchView:
        return self._mutate(match_id, "add_player", lambda m: game.add_player_to_match(m, player))

    def add_round(self, match_id: str, cards_per_player: int, predictions: Mapping[str, int]) -> MatchView:
        return self._mutate(
            match_id,
            "add_round",
            lambda m: game.add_round(m, cards_per_player, predictions),
        )

    def record_results(self, match_id: str, round_index: int, results: Mapping[str, int]) -> MatchView:
        return self._mutate(
            match_id,
            "record_results",
            lambda m: game.update_round_results(m, round_index, results, rules=self.rules),
        )

    def complete_match(self, match_id: str) -> MatchView:
        return self._mutate(match_id, "complete_match", game.complete_match)

    def cancel_match(self, match_id: str) -> MatchView:
        return self._mutate(match_id, "cancel_match", game.cancel_match)

    # Views -------------------------------------------------------------

    def get_match_view(self, match_id: str) -> MatchView:
        return self.build_view(self.repository.load(match_id))

    def active_matches(self, player: str) -> List[MatchView]:
        matches = [m for m in self.repository.list_matches() if m.is_active and player in m.players]
        matches.sort(key=lambda m: m.created_at, reverse=True)
        return [self.build_view(m) for m in matches]

    def recent_matches(self, player: str, limit: int = 5) -> List[MatchView]:
        finished = [m for m in self.repository.list_matches() if not m.is_active and player in m.players]
        finished.sort(key=lambda m: m.completed_at or m.created_at, reverse=True)
        return [self.build_view(m) for m in finished[:limit]]

    def player_stats(self, player: str) -> PlayerStats:
        return player_stats(self.repository.list_matches(), player)

    def build_view(self, match: Match) -> MatchView:
        totals = total_scores(match)
        standings = [
            StandingView(
                rank=index,
                player=standing.player,
                total=standing.total,
                status=str(standing.status),
                near_win=standing.near_win,
            )
            for index, standing in enumerate(ranked_standings(match, self.rules.near_win_ratio), start=1)
        ]
        latest: Optional[Round] = match.rounds[-1] if match.rounds else None
        return MatchView(
            id=match.id,
            status=str(match.status),
            players=list(match.players),
            winning_points=match.winning_points,
            rounds=[_round_view(index, round_) for index, round_ in enumerate(match.rounds, start=1)],
            losers=list(match.losers),
            winner=match.winner,
            totals=totals,
            active_players=match.active_players(),
            standings=standings,
            pending_round_index=match.pending_round_index(),
            next_round_cards=default_cards_for_round(len(match.rounds), self.rules.max_default_cards),
            under_total=latest.is_under_total if latest is not None else False,
            created_at=match.created_at.isoformat(),
            completed_at=match.completed_at.isoformat() if match.completed_at else None,
        )

    # Helpers -----------------------------------------------------------

    def _mutate(self, match_id: str, operation: str, apply: Callable[[Match], Match]) -> MatchView:
        with self._match_lock(match_id):
            match = self.repository.load(match_id)
            try:
                updated = apply(match)
            except (MatchError, RoundError, ScoringError) as exc:
                logger.warning(
                    "operation rejected",
                    match_id=match_id,
                    operation=operation,
                    error=type(exc).__name__,
                    reason=str(exc),
                )
                raise
            self.repository.save(updated)
        if match.status is MatchStatus.ACTIVE and updated.status is not MatchStatus.ACTIVE:
            logger.info("match closed", match_id=match_id, status=updated.status, winner=updated.winner)
        return self.build_view(updated)

    @contextmanager
    def _match_lock(self, match_id: str) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault(match_id, threading.Lock())
        with lock:
            yield


def _round_view(number: int, round_: Round) -> RoundView:
    return RoundView(
        id=round_.id,
        number=number,
        cards_per_player=round_.cards_per_player,
        predictions=dict(round_.player_predictions),
        results=dict(round_.player_results),
        scores=dict(round_.player_scores),
        awaiting_results=round_.awaiting_results,
        prediction_total=round_.prediction_total,
        under_total=round_.is_under_total,
    )
