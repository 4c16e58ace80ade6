"""Redis client factory.

The rest of the code works against the synchronous client and its RediSearch
commands. Blocking calls are wrapped via ``asyncio.to_thread`` by the caller
where necessary.
"""
from __future__ import annotations

import logging
from functools import lru_cache

import redis

from .config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_client() -> redis.Redis:
    logger.info("Connecting to Redis at %s:%s/%s", settings.redis_host, settings.redis_port, settings.redis_db)
    return redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=settings.redis_db,
        decode_responses=True,
        # Undecodable bytes become U+FFFD instead of failing the whole reply;
        # suggestion payloads treat that as a per-entry decode failure.
        encoding_errors="replace",
    )
