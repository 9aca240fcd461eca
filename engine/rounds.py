"""Round construction and result validation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Sequence

import structlog

from .rules_schema import DEFAULT_SCORING, ScoringConfig
from .scoring import InvalidRoundData, score_round
from .state import Match, Round

logger = structlog.get_logger()


class RoundError(ValueError):
    """Base class for round related errors."""


class ValidationError(RoundError):
    """Raised when predictions or results break a game rule."""


@dataclass(frozen=True)
class PredictionCheck:
    total: int
    cards_per_player: int

    @property
    def under_total(self) -> bool:
        return self.total < self.cards_per_player


def _is_count(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_range(kind: str, values: Mapping[str, int], cards_per_player: int) -> None:
    for player, value in values.items():
        if not _is_count(value):
            raise ValidationError(f"{kind} for {player} must be an integer, got {value!r}.")
        if value < 0 or value > cards_per_player:
            raise ValidationError(
                f"{kind} for {player} must be between 0 and {cards_per_player}, got {value}."
            )


def check_predictions(
    active_players: Sequence[str],
    cards_per_player: int,
    predictions: Mapping[str, int],
) -> PredictionCheck:
    """Validate a new round's predictions against the active players.

    Raises:
        ValidationError: bad card count, missing or extra players, values out
            of range, or a total equal to the number of cards.
    """
    if not _is_count(cards_per_player) or cards_per_player <= 0:
        raise ValidationError(f"Cards per player must be a positive integer, got {cards_per_player!r}.")

    missing = [player for player in active_players if player not in predictions]
    if missing:
        raise ValidationError(f"Every active player needs a prediction; missing {missing}.")
    unexpected = [player for player in predictions if player not in active_players]
    if unexpected:
        raise ValidationError(f"Predictions given for players who are not active: {unexpected}.")

    _check_range("Prediction", predictions, cards_per_player)

    total = sum(predictions.values())
    if total == cards_per_player:
        raise ValidationError(
            f"Total predictions ({total}) cannot equal the number of cards ({cards_per_player})."
        )
    return PredictionCheck(total=total, cards_per_player=cards_per_player)


def build_round(match: Match, cards_per_player: int, predictions: Mapping[str, int]) -> Round:
    """Return a new round for ``match`` after validating it; ``match`` is untouched."""
    match.ensure_active()
    pending = match.pending_round_index()
    if pending is not None:
        raise ValidationError(f"Round {pending + 1} is still awaiting results.")

    active = match.active_players()
    check = check_predictions(active, cards_per_player, predictions)
    if check.under_total:
        logger.info(
            "under-total predictions",
            match_id=match.id,
            total=check.total,
            cards_per_player=cards_per_player,
        )
    ordered = {player: predictions[player] for player in active}
    return Round(cards_per_player=cards_per_player, player_predictions=ordered)


def check_results(round_: Round, results: Mapping[str, int]) -> None:
    if not round_.awaiting_results:
        raise ValidationError(f"Results for round {round_.id} were already recorded.")

    missing = [player for player in round_.player_predictions if player not in results]
    if missing:
        raise InvalidRoundData(f"Results missing for predicting players: {missing}.")
    unexpected = [player for player in results if player not in round_.player_predictions]
    if unexpected:
        raise ValidationError(f"Results given for players without a prediction: {unexpected}.")

    _check_range("Result", results, round_.cards_per_player)

    total = sum(results.values())
    if total != round_.cards_per_player:
        raise ValidationError(
            f"Total results ({total}) must equal the number of cards ({round_.cards_per_player})."
        )


def score_results(
    round_: Round,
    results: Mapping[str, int],
    config: ScoringConfig = DEFAULT_SCORING,
) -> Round:
    """Return a copy of ``round_`` with results and scores filled in."""
    check_results(round_, results)
    ordered: Dict[str, int] = {player: results[player] for player in round_.player_predictions}
    scores = score_round(round_.player_predictions, ordered, config)
    return replace(round_, player_results=ordered, player_scores=scores)


def default_cards_for_round(round_number: int, max_cards: int = 10) -> int:
    """Suggested card count for the round at ``round_number`` (zero based)."""
    return max(1, min(max_cards, round_number + 1))
