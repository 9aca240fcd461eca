"""Scoring and progression engine for prediction card-game matches."""

__all__ = [
    "state",
    "scoring",
    "rounds",
    "progression",
    "game",
    "encode",
    "storage",
    "stats",
    "service",
    "rules_schema",
    "logging",
]
