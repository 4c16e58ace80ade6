"""Run compiled query expressions against a RediSearch index."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from time import perf_counter
from typing import Dict, List, Optional, Sequence

import redis
from redis.commands.search.query import Query

logger = logging.getLogger(__name__)

RawResult = Dict[str, str]


@dataclass(frozen=True)
class SearchOptions:
    highlight_fields: Sequence[str] = ()
    highlight_tags: Optional[tuple[str, str]] = None
    sort_field: Optional[str] = None
    ascending: bool = True
    offset: int = 0
    limit: int = 10

    @classmethod
    def page(cls, page_index: int, page_size: int, **kwargs) -> "SearchOptions":
        if page_index < 0:
            raise ValueError(f"page index must be >= 0, got {page_index}")
        if page_size <= 0:
            raise ValueError(f"page size must be > 0, got {page_size}")
        return cls(offset=page_index * page_size, limit=page_size, **kwargs)

    def build_query(self, expression: str) -> Query:
        query = Query(expression).paging(self.offset, self.limit)
        if self.sort_field:
            query = query.sort_by(self.sort_field, asc=self.ascending)
        if self.highlight_fields:
            query = query.highlight(fields=list(self.highlight_fields), tags=self.highlight_tags)
        return query


@dataclass
class SearchPage:
    total: int
    results: List[RawResult] = field(default_factory=list)
    duration: float = 0.0


def _to_raw_result(document) -> RawResult:
    return {key: value for key, value in vars(document).items() if key != "payload" and value is not None}


class SearchExecutor:
    """Thin wrapper that times a single ``FT.SEARCH`` round-trip."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def execute(self, index: str, expression: str, options: SearchOptions) -> SearchPage:
        query = options.build_query(expression)
        start = perf_counter()
        # Errors from the store are left to the caller; there is no retry here.
        result = self._client.ft(index).search(query)
        end = perf_counter()

        page = SearchPage(
            total=int(result.total),
            results=[_to_raw_result(doc) for doc in result.docs],
            duration=end - start,
        )
        logger.info(
            "search index=%s query=%r offset=%s limit=%s total=%s returned=%s took=%.4fs",
            index,
            expression,
            options.offset,
            options.limit,
            page.total,
            len(page.results),
            page.duration,
        )
        return page
