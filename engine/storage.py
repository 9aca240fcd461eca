"""Match repositories used by the service layer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Union

import structlog

from .encode import deserialize_match, serialize_match
from .state import Match

logger = structlog.get_logger()


class MatchNotFound(KeyError):
    """Raised when no match is stored under the requested id."""


class MatchRepository:
    """Base class for match persistence."""

    def load(self, match_id: str) -> Match:
        raise NotImplementedError

    def save(self, match: Match) -> None:
        raise NotImplementedError

    def list_matches(self) -> List[Match]:
        raise NotImplementedError


class InMemoryMatchRepository(MatchRepository):
    """Keeps encoded snapshots so callers never share state with the store."""

    def __init__(self) -> None:
        self._payloads: Dict[str, dict] = {}

    def load(self, match_id: str) -> Match:
        try:
            payload = self._payloads[match_id]
        except KeyError as exc:
            raise MatchNotFound(match_id) from exc
        return deserialize_match(json.loads(json.dumps(payload)))

    def save(self, match: Match) -> None:
        self._payloads[match.id] = serialize_match(match)
        logger.debug("match saved", match_id=match.id, backend="memory")

    def list_matches(self) -> List[Match]:
        return [self.load(match_id) for match_id in self._payloads]


class JsonMatchRepository(MatchRepository):
    """One JSON file per match inside ``directory``."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, match_id: str) -> Path:
        return self.directory / f"{match_id}.json"

    def load(self, match_id: str) -> Match:
        path = self._path(match_id)
        if not path.exists():
            raise MatchNotFound(match_id)
        return load_match_file(path)

    def save(self, match: Match) -> None:
        path = self._path(match.id)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(serialize_match(match), f, indent=4)
        tmp_path.replace(path)
        logger.debug("match saved", match_id=match.id, path=str(path))

    def list_matches(self) -> List[Match]:
        return [load_match_file(path) for path in sorted(self.directory.glob("*.json"))]


def load_match_file(path: Union[str, Path]) -> Match:
    with open(path, "r", encoding="utf-8") as f:
        return deserialize_match(json.load(f))
