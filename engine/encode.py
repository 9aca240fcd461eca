"""Plain-dict encoding of matches for storage."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .state import Match, Round

SCHEMA_VERSION = 1

MATCH_FIELDS = (
    "id",
    "players",
    "winning_points",
    "rounds",
    "losers",
    "winner",
    "is_active",
    "is_cancelled",
    "created_at",
    "completed_at",
)


class DecodeError(ValueError):
    """Raised when a stored payload cannot be turned back into a match."""


def _encode_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _decode_time(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Invalid timestamp {value!r}") from exc


def serialize_round(round_: Round) -> Dict[str, Any]:
    return {
        "id": round_.id,
        "cards_per_player": round_.cards_per_player,
        "player_predictions": dict(round_.player_predictions),
        "player_results": dict(round_.player_results),
        "player_scores": dict(round_.player_scores),
    }


def deserialize_round(payload: Mapping[str, Any]) -> Round:
    try:
        return Round(
            id=payload["id"],
            cards_per_player=int(payload["cards_per_player"]),
            player_predictions={k: int(v) for k, v in payload["player_predictions"].items()},
            player_results={k: int(v) for k, v in payload.get("player_results", {}).items()},
            player_scores={k: int(v) for k, v in payload.get("player_scores", {}).items()},
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"Invalid round payload: {exc}") from exc


def serialize_match(match: Match) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "id": match.id,
        "players": list(match.players),
        "winning_points": match.winning_points,
        "rounds": [serialize_round(round_) for round_ in match.rounds],
        "losers": list(match.losers),
        "winner": match.winner,
        "is_active": match.is_active,
        "is_cancelled": match.is_cancelled,
        "created_at": _encode_time(match.created_at),
        "completed_at": _encode_time(match.completed_at),
        "starting_scores": dict(match.starting_scores),
    }


def deserialize_match(payload: Mapping[str, Any]) -> Match:
    version = payload.get("schema_version")
    if version != SCHEMA_VERSION:
        raise DecodeError(f"Unsupported schema_version: {version!r}")
    missing = [name for name in MATCH_FIELDS if name not in payload]
    if missing:
        raise DecodeError(f"Missing field(s): {missing}")

    created_at = _decode_time(payload["created_at"])
    if created_at is None:
        raise DecodeError("created_at is required")

    try:
        return Match(
            id=payload["id"],
            players=list(payload["players"]),
            winning_points=int(payload["winning_points"]),
            rounds=[deserialize_round(item) for item in payload["rounds"]],
            losers=list(payload["losers"]),
            winner=payload["winner"],
            is_active=bool(payload["is_active"]),
            is_cancelled=bool(payload["is_cancelled"]),
            created_at=created_at,
            completed_at=_decode_time(payload["completed_at"]),
            starting_scores={k: int(v) for k, v in payload.get("starting_scores", {}).items()},
        )
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"Invalid match payload: {exc}") from exc
