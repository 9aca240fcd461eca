"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Mapping, Optional

from engine.state import Match

from .base import PredictionStrategy, dodge_forbidden_total


class RandomBot(PredictionStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def predict(
        self,
        match: Match,
        player: str,
        cards_per_player: int,
        taken: Mapping[str, int],
        *,
        is_last: bool,
    ) -> int:
        prediction = self._rng.randint(0, cards_per_player)
        if is_last:
            prediction = dodge_forbidden_total(prediction, cards_per_player, sum(taken.values()))
        return prediction
