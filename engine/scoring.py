"""Round scoring helpers.

An exact prediction earns ``exact_base + exact_per_hand * prediction``; a miss
costs ``miss_per_hand`` for every hand of difference. With the default rules
that is ``10 + 10 * prediction`` and ``-10 * |prediction - result|``.
"""

from __future__ import annotations

from typing import Dict, Mapping

from .rules_schema import DEFAULT_SCORING, ScoringConfig


class ScoringError(ValueError):
    """Base class for scoring issues."""


class InvalidRoundData(ScoringError):
    """Raised when results do not line up with the round's predictions."""


def score_prediction(prediction: int, result: int, config: ScoringConfig = DEFAULT_SCORING) -> int:
    if prediction == result:
        return config.exact_base + config.exact_per_hand * prediction
    return -config.miss_per_hand * abs(prediction - result)


def score_round(
    predictions: Mapping[str, int],
    results: Mapping[str, int],
    config: ScoringConfig = DEFAULT_SCORING,
) -> Dict[str, int]:
    """Score every predicting player of a round."""
    missing = [player for player in predictions if player not in results]
    if missing:
        raise InvalidRoundData(f"Results missing for predicting players: {sorted(missing)}")
    return {
        player: score_prediction(prediction, results[player], config)
        for player, prediction in predictions.items()
    }
