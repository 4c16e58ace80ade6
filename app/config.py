"""Application configuration and constants."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Tuple


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _get_bool(name: str, default: str) -> bool:
    return _get_env(name, default).lower() in {"1", "true", "yes"}


def _get_list(name: str, default: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in _get_env(name, default).split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Simple settings container with environment variable overrides."""

    redis_host: str = _get_env("REDIS_HOST", "localhost")
    redis_port: int = int(_get_env("REDIS_PORT", "6379"))
    redis_db: int = int(_get_env("REDIS_DB", "0"))

    product_index: str = _get_env("PRODUCT_INDEX", "products")
    store_index: str = _get_env("STORE_INDEX", "stores")
    inventory_index: str = _get_env("INVENTORY_INDEX", "inventory")
    brewery_suggestion_key: str = _get_env("BREWERY_SUGGESTION_KEY", "breweries")
    brewery_fuzzy: bool = _get_bool("BREWERY_FUZZY", "true")
    food_suggestion_key: str = _get_env("FOOD_SUGGESTION_KEY", "foods")
    food_fuzzy: bool = _get_bool("FOOD_FUZZY", "false")
    suggestion_max: int = int(_get_env("SUGGESTION_MAX", "20"))

    availability_radius: float = float(_get_env("AVAILABILITY_RADIUS", "25"))
    radius_unit: str = _get_env("RADIUS_UNIT", "mi")
    inventory_search_limit: int = int(_get_env("INVENTORY_SEARCH_LIMIT", "1000"))
    store_search_limit: int = int(_get_env("STORE_SEARCH_LIMIT", "100"))
    default_page_size: int = int(_get_env("DEFAULT_PAGE_SIZE", "100"))

    highlight_open: str = _get_env("HIGHLIGHT_OPEN", "<mark>")
    highlight_close: str = _get_env("HIGHLIGHT_CLOSE", "</mark>")

    # Lower bounds of every bucket above the first one, ascending.
    availability_thresholds: Tuple[int, ...] = tuple(
        int(value) for value in _get_list("AVAILABILITY_THRESHOLDS", "1,20,50")
    )
    availability_levels: Tuple[str, ...] = _get_list("AVAILABILITY_LEVELS", "none,low,medium,high")

    interaction_stream: str = _get_env("INTERACTION_STREAM", "interactions")
    interaction_stream_maxlen: int = int(_get_env("INTERACTION_STREAM_MAXLEN", "10000"))
    interaction_workers: int = int(_get_env("INTERACTION_WORKERS", "1"))
    interaction_max_pending: int = int(_get_env("INTERACTION_MAX_PENDING", "1000"))

    reference_data_path: str = _get_env("REFERENCE_DATA_PATH", "reference.json")
    session_cookie: str = _get_env("SESSION_COOKIE", "session")
    log_level: str = _get_env("LOG_LEVEL", "INFO")

    def validate(self) -> None:
        thresholds = list(self.availability_thresholds)
        if thresholds != sorted(set(thresholds)):
            raise ValueError(f"Availability thresholds must be strictly ascending: {thresholds}")
        if len(self.availability_levels) != len(thresholds) + 1:
            raise ValueError(
                f"Expected {len(thresholds) + 1} availability levels, got {len(self.availability_levels)}"
            )
        if self.availability_radius <= 0:
            raise ValueError("Availability radius must be positive")


settings = Settings()
