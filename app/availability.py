"""Derive availability levels from the available-to-promise quantity."""
from __future__ import annotations

import logging
from bisect import bisect_right
from typing import Iterable, List, MutableMapping, Sequence

from .config import Settings
from .fields import AVAILABLE_TO_PROMISE, LEVEL

logger = logging.getLogger(__name__)


def availability_level(quantity: int, thresholds: Sequence[int], levels: Sequence[str]) -> str:
    """Map ``quantity`` to a level name.

    ``thresholds`` holds the inclusive lower bound of every bucket after the
    first, so with ``(1, 20, 50)`` the buckets are ``<1``, ``[1, 20)``,
    ``[20, 50)`` and ``>=50``.
    """
    return levels[bisect_right(thresholds, quantity)]


def available_to_promise(result: MutableMapping[str, str]) -> int:
    raw = result.get(AVAILABLE_TO_PROMISE)
    if raw is None or not str(raw).strip():
        return 0
    try:
        return int(float(raw))
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring unparsable %s=%r", AVAILABLE_TO_PROMISE, raw)
        return 0


def augment(results: Iterable[MutableMapping[str, str]], settings: Settings) -> List[MutableMapping[str, str]]:
    """Write the level field into every record, in place."""
    augmented = []
    for result in results:
        result[LEVEL] = availability_level(
            available_to_promise(result),
            settings.availability_thresholds,
            settings.availability_levels,
        )
        augmented.append(result)
    return augmented
