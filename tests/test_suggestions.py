"""Autocomplete decoding degrades per entry."""

import logging

from redis.commands.search.suggestion import Suggestion
from redis.connection import Encoder

from app.redis_client import get_client
from app.suggestions import SuggestionService, decode_brewery_payload


def test_corrupt_payload_keeps_neighbours(fake_redis, settings, caplog):
    service = SuggestionService(fake_redis)

    with caplog.at_level(logging.ERROR):
        results = service.breweries(settings.brewery_suggestion_key, "Sto", fuzzy=True)

    assert [r.name for r in results] == ["Stone Brewing", "Stoudts Brewing", "Storm Brewing"]
    assert (results[0].id, results[0].icon) == ("b1", "stone.png")
    assert (results[1].id, results[1].icon) == (None, None)
    assert (results[2].id, results[2].icon) == ("b3", "storm.png")
    assert "Could not deserialize brewery payload" in caplog.text


def test_missing_payload_decodes_to_empty_record():
    payload = decode_brewery_payload(None)

    assert payload.id is None and payload.icon is None


def test_non_object_payload_decodes_to_empty_record():
    assert decode_brewery_payload("[1, 2]").id is None


def test_names_ignore_payloads(fake_redis, settings):
    names = SuggestionService(fake_redis).names(settings.food_suggestion_key, "St")

    assert names == ["Stilton", "Stew"]
    assert fake_redis.sugget_calls[-1]["with_payloads"] is False


def test_lookup_is_bounded_and_defaults_to_empty_prefix(fake_redis, settings):
    SuggestionService(fake_redis, max_results=2).suggest(settings.brewery_suggestion_key)

    call = fake_redis.sugget_calls[-1]
    assert call["prefix"] == ""
    assert call["num"] == 2


def test_invalid_utf8_payload_degrades_only_that_entry(fake_redis, settings):
    """Reply bytes go through the production client's decoding before parsing."""

    kwargs = get_client().connection_pool.connection_kwargs
    encoder = Encoder(kwargs["encoding"], kwargs["encoding_errors"], kwargs["decode_responses"])
    reply = [
        b"Stone Brewing",
        b'{"id": "b1", "icon": "stone.png"}',
        b"Stoudts Brewing",
        b"\xff\xfe",
        b"Storm Brewing",
        b'{"id": "b3", "icon": "storm.png"}',
    ]
    decoded = [encoder.decode(value) for value in reply]
    fake_redis.suggestions[settings.brewery_suggestion_key] = [
        Suggestion(decoded[i], 1.0, decoded[i + 1]) for i in range(0, len(decoded), 2)
    ]

    results = SuggestionService(fake_redis).breweries(settings.brewery_suggestion_key, "Sto")

    assert [r.name for r in results] == ["Stone Brewing", "Stoudts Brewing", "Storm Brewing"]
    assert (results[1].id, results[1].icon) == (None, None)
    assert results[2].id == "b3"


def test_raw_payload_bytes_are_decoded_per_entry():
    assert decode_brewery_payload(b"\xff\xfe").id is None
    assert decode_brewery_payload(b'{"id": "b1", "icon": "x.png"}').id == "b1"
