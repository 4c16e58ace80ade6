"""Record which stores and products a session looked at.

Recording is a side effect of product search: it runs on a dedicated worker
pool so the request never waits for it, and failures stay in the worker.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import redis

logger = logging.getLogger(__name__)


class InteractionRecorder(Protocol):
    def record(self, session_id: str, store_ids: Sequence[str], product_ids: Sequence[str]) -> None: ...


@dataclass
class RedisStreamRecorder:
    client: redis.Redis
    stream: str
    maxlen: int = 10000

    def record(self, session_id: str, store_ids: Sequence[str], product_ids: Sequence[str]) -> None:
        self.client.xadd(
            self.stream,
            {
                "session": session_id,
                "stores": ",".join(store_ids),
                "skus": ",".join(product_ids),
            },
            maxlen=self.maxlen,
            approximate=True,
        )


class InteractionDispatcher:
    def __init__(self, recorder: InteractionRecorder, max_workers: int = 1, max_pending: int = 1000) -> None:
        self._recorder = recorder
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="interactions")
        # Counts queued plus running recordings; the pool's own queue is unbounded.
        self._slots = threading.BoundedSemaphore(max_pending)

    def dispatch(self, session_id: str, store_ids: Sequence[str], product_ids: Sequence[str]) -> Optional[Future]:
        if not product_ids:
            return None
        if not self._slots.acquire(blocking=False):
            logger.warning("Interaction backlog is full; dropping session %s", session_id)
            return None
        try:
            return self._pool.submit(self._record, session_id, list(store_ids), list(product_ids))
        except RuntimeError:
            self._slots.release()
            logger.warning("Interaction dispatcher is shut down; dropping session %s", session_id)
            return None

    def _record(self, session_id: str, store_ids: list[str], product_ids: list[str]) -> None:
        try:
            self._recorder.record(session_id, store_ids, product_ids)
        except Exception:
            logger.exception("Could not record interactions for session %s", session_id)
            return
        finally:
            self._slots.release()
        logger.debug("recorded session=%s stores=%s skus=%s", session_id, len(store_ids), len(product_ids))

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
