"""Match and round state for prediction matches."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Dict, List, Optional


class MatchError(RuntimeError):
    """Base class for match lifecycle errors."""


class InactiveMatchError(MatchError):
    """Raised when a completed or cancelled match is asked to change."""


class DuplicatePlayerError(MatchError):
    """Raised when a player is added to a match they already belong to."""


class MatchStatus(Enum):
    ACTIVE = auto()
    COMPLETED = auto()
    CANCELLED = auto()

    def __str__(self) -> str:
        return self.name.lower()


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Round:
    """One round: predictions first, then results and the derived scores."""

    cards_per_player: int
    player_predictions: Dict[str, int]
    player_results: Dict[str, int] = field(default_factory=dict)
    player_scores: Dict[str, int] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    @property
    def awaiting_results(self) -> bool:
        return not self.player_results

    @property
    def prediction_total(self) -> int:
        return sum(self.player_predictions.values())

    @property
    def is_under_total(self) -> bool:
        return self.prediction_total < self.cards_per_player


@dataclass
class Match:
    players: List[str]
    winning_points: int
    id: str = field(default_factory=new_id)
    rounds: List[Round] = field(default_factory=list)
    losers: List[str] = field(default_factory=list)
    winner: Optional[str] = None
    is_active: bool = True
    is_cancelled: bool = False
    created_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    starting_scores: Dict[str, int] = field(default_factory=dict)

    @property
    def status(self) -> MatchStatus:
        if self.is_cancelled:
            return MatchStatus.CANCELLED
        if self.is_active:
            return MatchStatus.ACTIVE
        return MatchStatus.COMPLETED

    def active_players(self) -> List[str]:
        """Players that have not reached the winning points yet, in join order."""
        finished = set(self.losers)
        return [player for player in self.players if player not in finished]

    def pending_round_index(self) -> Optional[int]:
        for index, round_ in enumerate(self.rounds):
            if round_.awaiting_results:
                return index
        return None

    def ensure_active(self) -> None:
        if self.is_cancelled:
            raise InactiveMatchError(f"Match {self.id} was cancelled.")
        if not self.is_active:
            raise InactiveMatchError(f"Match {self.id} is already completed.")
