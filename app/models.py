"""Pydantic models for request/response payloads."""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .config import settings


class SortDirection(str, Enum):
    ASCENDING = "Ascending"
    DESCENDING = "Descending"


_DIRECTION_ALIASES = {
    "asc": SortDirection.ASCENDING,
    "ascending": SortDirection.ASCENDING,
    "desc": SortDirection.DESCENDING,
    "descending": SortDirection.DESCENDING,
}


class ProductQuery(BaseModel):
    query: str | None = Field("*", description="Free-text query, '*' matches everything")
    sortByField: str | None = None
    sortByDirection: SortDirection = SortDirection.ASCENDING
    pageIndex: int = Field(0, ge=0)
    pageSize: int = Field(settings.default_page_size, gt=0)

    @field_validator("sortByDirection", mode="before")
    @classmethod
    def _normalize_direction(cls, value):
        if value is None:
            return SortDirection.ASCENDING
        if isinstance(value, str):
            alias = _DIRECTION_ALIASES.get(value.strip().lower())
            if alias is not None:
                return alias
        return value

    @property
    def offset(self) -> int:
        return self.pageIndex * self.pageSize

    @property
    def ascending(self) -> bool:
        return self.sortByDirection is SortDirection.ASCENDING


class ResultsPage(BaseModel):
    count: int
    results: list[dict[str, str]]
    duration: float
    pageIndex: int
    pageSize: int


class Category(BaseModel):
    id: str
    name: str


class Style(BaseModel):
    id: str
    name: str


class BrewerySuggestionPayload(BaseModel):
    id: str | None = None
    icon: str | None = None


class BrewerySuggestion(BaseModel):
    id: str | None = None
    name: str
    icon: str | None = None
