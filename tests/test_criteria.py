"""Query expression compilation."""

import pytest

from app.criteria import GeoFilter, compose, escape_tag, numeric_criteria, tag_criteria, text_criteria


@pytest.mark.parametrize("raw", [None, "", "   ", "*"])
def test_blank_text_becomes_match_all(raw):
    assert text_criteria(raw) == "*"


def test_text_passes_through_plain_terms():
    assert text_criteria("  hazy ipa* ") == "hazy ipa*"


def test_text_cannot_open_field_clauses():
    """User text must not be able to smuggle in a tag or geo filter."""

    compiled = text_criteria("ipa @sku:{X}")

    assert compiled == r"ipa \@sku\:\{X\}"
    assert "@sku:{" not in compiled


def test_tag_escapes_separators():
    assert tag_criteria("sku", "IPA-001") == r"@sku:{IPA\-001}"
    assert escape_tag("a b,c") == r"a\ b\,c"


def test_numeric_range_uses_open_bounds():
    assert numeric_criteria("availableToPromise", 0, None) == "@availableToPromise:[0 inf]"
    assert numeric_criteria("availableToPromise", None, 5) == "@availableToPromise:[-inf 5]"


@pytest.mark.parametrize(
    "lon,lat,radius",
    [(-122.4, 37.7, 25.0), (0.0, 0.0, 0.5), (179.999999, -89.123456789, 1234.5), (-180.0, 90.0, 1e-3)],
)
def test_geo_filter_round_trip(lon, lat, radius):
    compiled = GeoFilter(lon, lat, radius, "km").to_query("location")
    parsed = GeoFilter.parse(compiled)

    assert compiled.startswith("@location:[")
    assert (parsed.longitude, parsed.latitude, parsed.radius, parsed.unit) == (lon, lat, radius, "km")


@pytest.mark.parametrize("lon,lat,radius", [(181.0, 0.0, 1.0), (0.0, -91.0, 1.0), (0.0, 0.0, 0.0)])
def test_geo_filter_rejects_bad_values(lon, lat, radius):
    with pytest.raises(ValueError):
        GeoFilter(lon, lat, radius)


def test_compose_keeps_order_and_skips_empty():
    assert compose("ipa", None, "", "@sku:{X}") == "ipa @sku:{X}"


def test_parameter_and_fuzzy_markers_are_escaped():
    assert text_criteria("$x 50%") == r"\$x 50\%"


def test_balanced_phrases_pass_and_unbalanced_quotes_fail():
    assert text_criteria('"hazy ipa"') == '"hazy ipa"'
    with pytest.raises(ValueError):
        text_criteria('"ipa')
