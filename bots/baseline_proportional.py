"""Baseline bot predicting its fair share of the hands."""

from __future__ import annotations

from typing import Mapping

from engine.state import Match

from .base import PredictionStrategy, dodge_forbidden_total


class ProportionalBot(PredictionStrategy):
    name = "Proportional"

    def predict(
        self,
        match: Match,
        player: str,
        cards_per_player: int,
        taken: Mapping[str, int],
        *,
        is_last: bool,
    ) -> int:
        active = max(1, len(match.active_players()))
        prediction = round(cards_per_player / active)
        if is_last:
            remaining = max(0, cards_per_player - sum(taken.values()))
            prediction = min(prediction, remaining)
            prediction = dodge_forbidden_total(prediction, cards_per_player, sum(taken.values()))
        return prediction
