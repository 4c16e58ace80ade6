"""Shared fixtures: an in-memory stand-in for the RediSearch client."""
from __future__ import annotations

from types import SimpleNamespace

import pytest
import redis
from redis.commands.search.document import Document
from redis.commands.search.suggestion import Suggestion

from app.config import Settings
from app.executor import SearchExecutor
from app.interactions import InteractionDispatcher
from app.models import Category, Style
from app.reference import ReferenceData
from app.service import QueryService
from app.suggestions import SuggestionService


def limit_args(query) -> tuple[int, int]:
    args = query.get_args()
    position = args.index("LIMIT")
    return int(args[position + 1]), int(args[position + 2])


class FakeIndex:
    def __init__(self, store: "FakeRedis", name: str) -> None:
        self.store = store
        self.name = name

    def search(self, query):
        if self.store.error is not None:
            raise self.store.error
        self.store.queries.append((self.name, query))
        docs = self.store.documents.get(self.name, [])
        offset, num = limit_args(query)
        return SimpleNamespace(total=len(docs), docs=docs[offset : offset + num])

    def sugget(self, key, prefix, fuzzy=False, num=10, with_scores=False, with_payloads=False):
        if self.store.error is not None:
            raise self.store.error
        self.store.sugget_calls.append(
            {"key": key, "prefix": prefix, "fuzzy": fuzzy, "num": num, "with_payloads": with_payloads}
        )
        entries = self.store.suggestions.get(key, [])[:num]
        if not with_payloads:
            return [Suggestion(entry.string, entry.score) for entry in entries]
        return list(entries)


class FakeRedis:
    def __init__(self) -> None:
        self.documents: dict[str, list[Document]] = {}
        self.suggestions: dict[str, list[Suggestion]] = {}
        self.queries: list = []
        self.sugget_calls: list[dict] = []
        self.streams: dict[str, list[dict]] = {}
        self.error: Exception | None = None

    def ft(self, index_name: str = "idx") -> FakeIndex:
        return FakeIndex(self, index_name)

    def xadd(self, name, fields, maxlen=None, approximate=True):
        self.streams.setdefault(name, []).append(dict(fields))
        return f"{len(self.streams[name])}-0"

    def queries_for(self, index: str) -> list:
        return [query for name, query in self.queries if name == index]


class ListRecorder:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple] = []
        self.fail = fail

    def record(self, session_id, store_ids, product_ids) -> None:
        if self.fail:
            raise redis.ConnectionError("stream unavailable")
        self.calls.append((session_id, list(store_ids), list(product_ids)))


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def fake_redis(settings) -> FakeRedis:
    client = FakeRedis()
    client.documents[settings.product_index] = [
        Document(f"product:{n}", sku=f"IPA-{n:03d}", name=f"Hazy <mark>IPA</mark> {n}") for n in range(1, 26)
    ]
    client.documents[settings.store_index] = [
        Document("store:1", store="1", location="-122.41,37.77"),
        Document("store:2", store="2", location="-122.39,37.71"),
    ]
    client.documents[settings.inventory_index] = [
        Document("inventory:1:IPA-001", store="1", sku="IPA-001", availableToPromise="0"),
        Document("inventory:2:IPA-001", store="2", sku="IPA-001", availableToPromise="35"),
    ]
    client.suggestions[settings.brewery_suggestion_key] = [
        Suggestion("Stone Brewing", 1.0, '{"id": "b1", "icon": "stone.png"}'),
        Suggestion("Stoudts Brewing", 1.0, "{not json"),
        Suggestion("Storm Brewing", 1.0, '{"id": "b3", "icon": "storm.png"}'),
    ]
    client.suggestions[settings.food_suggestion_key] = [
        Suggestion("Stilton", 1.0, '{"id": "f1"}'),
        Suggestion("Stew", 1.0),
    ]
    return client


@pytest.fixture
def recorder() -> ListRecorder:
    return ListRecorder()


@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData(
        category_list=[Category(id="1", name="British Ale"), Category(id="2", name="Lager")],
        style_map={"1": [Style(id="10", name="Bitter"), Style(id="11", name="Porter")]},
    )


@pytest.fixture
def service(settings, fake_redis, recorder, reference):
    dispatcher = InteractionDispatcher(recorder)
    yield QueryService(
        settings=settings,
        executor=SearchExecutor(fake_redis),
        suggestions=SuggestionService(fake_redis, max_results=settings.suggestion_max),
        dispatcher=dispatcher,
        reference=reference,
    )
    dispatcher.shutdown(wait=True)
