"""Autocomplete lookups against RediSearch suggestion dictionaries."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import redis
from pydantic import ValidationError

from .models import BrewerySuggestion, BrewerySuggestionPayload

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 20
# What the client substitutes for bytes that are not valid UTF-8.
REPLACEMENT_CHAR = "\ufffd"


@dataclass(frozen=True)
class SuggestionEntry:
    string: str
    payload: Optional[str | bytes] = None


def decode_brewery_payload(raw: Optional[str | bytes]) -> BrewerySuggestionPayload:
    """Decode a JSON payload, falling back to an empty record on failure."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.error("Could not decode brewery payload bytes %r: %s", raw, exc)
            return BrewerySuggestionPayload()
    if raw is None or not raw.strip():
        logger.error("Missing brewery payload")
        return BrewerySuggestionPayload()
    if REPLACEMENT_CHAR in raw:
        logger.error("Brewery payload %r contains undecodable bytes", raw)
        return BrewerySuggestionPayload()
    try:
        return BrewerySuggestionPayload.model_validate_json(raw)
    except ValidationError as exc:
        logger.error("Could not deserialize brewery payload %r: %s", raw, exc)
        return BrewerySuggestionPayload()


class SuggestionService:
    def __init__(self, client: redis.Redis, max_results: int = DEFAULT_MAX_RESULTS) -> None:
        self._client = client
        self._max_results = max_results

    def suggest(self, key: str, prefix: str = "", fuzzy: bool = False, with_payloads: bool = True) -> List[SuggestionEntry]:
        suggestions = self._client.ft().sugget(
            key,
            prefix or "",
            fuzzy=fuzzy,
            num=self._max_results,
            with_payloads=with_payloads,
        )
        entries = [SuggestionEntry(string=s.string, payload=s.payload if with_payloads else None) for s in suggestions]
        logger.debug("sugget key=%s prefix=%r fuzzy=%s entries=%s", key, prefix, fuzzy, len(entries))
        return entries

    def breweries(self, key: str, prefix: str = "", fuzzy: bool = False) -> List[BrewerySuggestion]:
        results = []
        for entry in self.suggest(key, prefix, fuzzy=fuzzy, with_payloads=True):
            payload = decode_brewery_payload(entry.payload)
            results.append(BrewerySuggestion(id=payload.id, name=entry.string, icon=payload.icon))
        return results

    def names(self, key: str, prefix: str = "", fuzzy: bool = False) -> List[str]:
        return [entry.string for entry in self.suggest(key, prefix, fuzzy=fuzzy, with_payloads=False)]
