"""Compile search criteria into RediSearch query expressions.

Fragments are plain strings joined by spaces, which RediSearch reads as an
implicit AND. The free-text term always comes first, followed by tag, numeric
and geo filters::

    >>> compose(text_criteria("ipa"), tag_criteria("sku", "IPA-001"))
    'ipa @sku:{IPA\\\\-001}'
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

MATCH_ALL = "*"
GEO_UNITS = ("m", "km", "mi", "ft")

# Every character RediSearch treats as a tag separator or query operator.
_TAG_SPECIAL_RE = re.compile(r"([,.<>{}\[\]\"':;!@#$%^&*()\-+=~|/\\\s])")
# Characters that would let free text open a field-scoped clause, reference a
# query parameter or start a fuzzy term.
_TEXT_SPECIAL_RE = re.compile(r"([@{}\[\]():$%\\])")
_GEO_RE = re.compile(r"^@(?P<field>\w+):\[(?P<lon>\S+) (?P<lat>\S+) (?P<radius>\S+) (?P<unit>\w+)\]$")


def text_criteria(query: Optional[str]) -> str:
    """Return the free-text fragment, or the match-all token for blank input."""
    if query is None or not query.strip():
        return MATCH_ALL
    stripped = query.strip()
    if stripped == MATCH_ALL:
        return MATCH_ALL
    if stripped.count('"') % 2:
        raise ValueError("unbalanced quotes in query")
    return _TEXT_SPECIAL_RE.sub(r"\\\1", stripped)


def escape_tag(value: str) -> str:
    return _TAG_SPECIAL_RE.sub(r"\\\1", value)


def tag_criteria(field: str, value: str) -> str:
    return f"@{field}:{{{escape_tag(str(value))}}}"


def _bound(value: Optional[float], infinity: str) -> str:
    return infinity if value is None else str(value)


def numeric_criteria(field: str, low: Optional[float] = None, high: Optional[float] = None) -> str:
    return f"@{field}:[{_bound(low, '-inf')} {_bound(high, 'inf')}]"


@dataclass(frozen=True)
class GeoFilter:
    """Circle around a client-supplied point."""

    longitude: float
    latitude: float
    radius: float
    unit: str = "mi"

    def __post_init__(self) -> None:
        for name in ("longitude", "latitude", "radius"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be a finite number")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if self.radius <= 0:
            raise ValueError(f"radius must be positive: {self.radius}")
        if self.unit not in GEO_UNITS:
            raise ValueError(f"unsupported radius unit: {self.unit}")

    def to_query(self, field: str) -> str:
        return f"@{field}:[{float(self.longitude)!r} {float(self.latitude)!r} {float(self.radius)!r} {self.unit}]"

    @classmethod
    def parse(cls, fragment: str) -> "GeoFilter":
        match = _GEO_RE.match(fragment.strip())
        if not match:
            raise ValueError(f"not a geo filter: {fragment!r}")
        return cls(
            longitude=float(match.group("lon")),
            latitude=float(match.group("lat")),
            radius=float(match.group("radius")),
            unit=match.group("unit"),
        )


def compose(*fragments: Optional[str]) -> str:
    return " ".join(fragment for fragment in fragments if fragment)
