"""Validation schema for match rules configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


class RulesError(ValueError):
    """Raised when a rules file cannot be read or fails validation."""


class ScoringConfig(BaseModel):
    exact_base: int = Field(10, ge=0, description="Points for any exact prediction.")
    exact_per_hand: int = Field(10, ge=0, description="Extra points per predicted hand on an exact prediction.")
    miss_per_hand: int = Field(10, ge=0, description="Penalty per hand of difference on a missed prediction.")


class RuleSet(BaseModel):
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    min_players: int = Field(2, ge=2, description="Players required to create a match.")
    max_default_cards: int = Field(10, ge=1, description="Cap for the suggested cards of a new round.")
    near_win_ratio: float = Field(
        0.8,
        gt=0,
        le=1,
        description="Share of the winning points at which an active player is flagged as close to finishing.",
    )

    @field_validator("scoring")
    @classmethod
    def ensure_exact_beats_miss(cls, value: ScoringConfig) -> ScoringConfig:
        if value.exact_base == 0 and value.exact_per_hand == 0:
            raise ValueError("Exact predictions must be worth something.")
        return value


DEFAULT_RULES = RuleSet()
DEFAULT_SCORING = DEFAULT_RULES.scoring


def load_rules(path: Union[str, Path]) -> RuleSet:
    """Read a JSON rules file; missing keys fall back to the defaults."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise RulesError(f"Cannot read rules from {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise RulesError("Rules file must contain a JSON object.")
    try:
        return RuleSet.model_validate(raw)
    except PydanticValidationError as exc:
        raise RulesError(str(exc)) from exc
