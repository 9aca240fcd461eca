"""Per-player statistics across finished matches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .progression import ranked_standings, total_scores
from .state import Match, MatchStatus


@dataclass(frozen=True)
class PlayerStats:
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0
    final_rounds_played: int = 0
    total_points: int = 0
    average_position: float = 0.0

    @property
    def win_rate(self) -> float:
        if self.matches_played == 0:
            return 0.0
        return self.matches_won / self.matches_played


@dataclass(frozen=True)
class Leaders:
    most_wins: Optional[str]
    most_losses: Optional[str]


def counted_matches(matches: Iterable[Match], player: str) -> List[Match]:
    """Completed matches the player took part in; cancelled ones never count."""
    return [m for m in matches if m.status is MatchStatus.COMPLETED and player in m.players]


def _final_rounds(match: Match, player: str) -> int:
    return sum(
        1
        for round_ in match.rounds
        if not round_.awaiting_results
        and len(round_.player_predictions) == 2
        and player in round_.player_predictions
    )


def _position(match: Match, player: str) -> int:
    order = [standing.player for standing in ranked_standings(match)]
    return order.index(player) + 1


def player_stats(matches: Iterable[Match], player: str) -> PlayerStats:
    played = counted_matches(matches, player)
    won = sum(1 for m in played if m.winner == player)
    lost = sum(1 for m in played if m.winner is not None and m.winner != player)
    positions = [_position(m, player) for m in played]
    return PlayerStats(
        matches_played=len(played),
        matches_won=won,
        matches_lost=lost,
        final_rounds_played=sum(_final_rounds(m, player) for m in played),
        total_points=sum(total_scores(m)[player] for m in played),
        average_position=sum(positions) / len(positions) if positions else 0.0,
    )


SORT_KEYS = (
    "matches_played",
    "matches_won",
    "matches_lost",
    "final_rounds_played",
    "total_points",
    "average_position",
    "win_rate",
)


def ranked_players(
    matches: Iterable[Match],
    players: Sequence[str],
    key: str,
    descending: bool = True,
) -> List[Tuple[str, PlayerStats]]:
    """Players with their stats, sorted by one stat column; ties keep ``players`` order."""
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown stat column {key!r}; expected one of {SORT_KEYS}.")
    matches = list(matches)
    rows = [(player, player_stats(matches, player)) for player in players]
    return sorted(rows, key=lambda row: getattr(row[1], key), reverse=descending)


def leaders(matches: Iterable[Match], players: Sequence[str]) -> Leaders:
    matches = list(matches)
    stats = [(player, player_stats(matches, player)) for player in players]
    most_wins = _leader((player, s.matches_won) for player, s in stats)
    most_losses = _leader((player, s.matches_lost) for player, s in stats)
    return Leaders(most_wins=most_wins, most_losses=most_losses)


def _leader(counts) -> Optional[str]:
    best: Optional[str] = None
    best_count = 0
    for player, count in counts:
        if count > best_count:
            best, best_count = player, count
    return best
