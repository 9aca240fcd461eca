"""Baseline bot that never expects more than one hand."""

from __future__ import annotations

from typing import Mapping

from engine.state import Match

from .base import PredictionStrategy, dodge_forbidden_total


class CautiousBot(PredictionStrategy):
    name = "Cautious"

    def predict(
        self,
        match: Match,
        player: str,
        cards_per_player: int,
        taken: Mapping[str, int],
        *,
        is_last: bool,
    ) -> int:
        prediction = 1 if cards_per_player >= 4 else 0
        if is_last:
            prediction = dodge_forbidden_total(prediction, cards_per_player, sum(taken.values()))
        return prediction
