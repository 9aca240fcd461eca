"""Common prediction strategy interface."""

from __future__ import annotations

from typing import Mapping

from engine.state import Match


def dodge_forbidden_total(prediction: int, cards_per_player: int, taken: int) -> int:
    """Shift the last prediction off the one value that would make the total exact."""
    if taken + prediction != cards_per_player:
        return prediction
    if prediction + 1 <= cards_per_player:
        return prediction + 1
    return prediction - 1


class PredictionStrategy:
    """Base class for prediction policies."""

    name: str = "BaseBot"

    def on_match_start(self, match: Match) -> None:
        """Optional hook invoked once the match exists."""
        return None

    def predict(
        self,
        match: Match,
        player: str,
        cards_per_player: int,
        taken: Mapping[str, int],
        *,
        is_last: bool,
    ) -> int:
        """Return a prediction in ``[0, cards_per_player]``.

        ``taken`` holds the predictions already made this round. The last
        player to predict must not bring the total to ``cards_per_player``.
        """
        prediction = 0
        if is_last:
            prediction = dodge_forbidden_total(prediction, cards_per_player, sum(taken.values()))
        return prediction
