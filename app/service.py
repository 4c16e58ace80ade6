"""Request-level orchestration of search, availability and suggestions."""
from __future__ import annotations

import asyncio
import logging
import math
from typing import List, Optional

from .availability import augment
from .config import Settings
from .criteria import GeoFilter, compose, numeric_criteria, tag_criteria, text_criteria
from .errors import InvalidParameterError, MissingParameterError
from .executor import RawResult, SearchExecutor, SearchOptions
from .fields import AVAILABLE_TO_PROMISE, HIGHLIGHT_FIELDS, LOCATION, PRODUCT_ID, STORE_ID
from .interactions import InteractionDispatcher
from .models import BrewerySuggestion, Category, ProductQuery, ResultsPage, Style
from .reference import ReferenceData
from .suggestions import SuggestionService

logger = logging.getLogger(__name__)


class QueryService:
    def __init__(
        self,
        settings: Settings,
        executor: SearchExecutor,
        suggestions: SuggestionService,
        dispatcher: InteractionDispatcher,
        reference: ReferenceData,
    ) -> None:
        self.settings = settings
        self.executor = executor
        self.suggestions = suggestions
        self.dispatcher = dispatcher
        self.reference = reference

    def _geo_filter(self, longitude: Optional[float], latitude: Optional[float]) -> GeoFilter:
        if longitude is None:
            raise MissingParameterError("longitude")
        if latitude is None:
            raise MissingParameterError("latitude")
        for name, value, bound in (("longitude", longitude, 180.0), ("latitude", latitude, 90.0)):
            if not math.isfinite(value) or abs(value) > bound:
                raise InvalidParameterError(name, f"must be between -{bound:g} and {bound:g}")
        return GeoFilter(longitude, latitude, self.settings.availability_radius, self.settings.radius_unit)

    async def search_products(
        self,
        query: ProductQuery,
        longitude: Optional[float],
        latitude: Optional[float],
        session_id: str,
    ) -> ResultsPage:
        geo = self._geo_filter(longitude, latitude)
        logger.info("Searching for products around lon=%s lat=%s", longitude, latitude)
        options = SearchOptions.page(
            query.pageIndex,
            query.pageSize,
            highlight_fields=HIGHLIGHT_FIELDS,
            highlight_tags=(self.settings.highlight_open, self.settings.highlight_close),
            sort_field=query.sortByField or None,
            ascending=query.ascending,
        )
        try:
            expression = text_criteria(query.query)
        except ValueError as exc:
            raise InvalidParameterError("query", str(exc)) from exc
        page = await asyncio.to_thread(self.executor.execute, self.settings.product_index, expression, options)
        stores = await asyncio.to_thread(
            self.executor.execute,
            self.settings.store_index,
            geo.to_query(LOCATION),
            SearchOptions(limit=self.settings.store_search_limit),
        )
        store_ids = [r[STORE_ID] for r in stores.results if STORE_ID in r]
        product_ids = [r[PRODUCT_ID] for r in page.results if PRODUCT_ID in r]
        self.dispatcher.dispatch(session_id, store_ids, product_ids)
        return ResultsPage(
            count=page.total,
            results=page.results,
            duration=page.duration,
            pageIndex=query.pageIndex,
            pageSize=query.pageSize,
        )

    async def inventory(self, store: Optional[str] = None) -> List[RawResult]:
        expression = compose(
            numeric_criteria(AVAILABLE_TO_PROMISE, 0, None),
            tag_criteria(STORE_ID, store) if store else None,
        )
        options = SearchOptions(sort_field=STORE_ID, ascending=True, limit=self.settings.inventory_search_limit)
        page = await asyncio.to_thread(self.executor.execute, self.settings.inventory_index, expression, options)
        return page.results

    async def availability(
        self,
        longitude: Optional[float],
        latitude: Optional[float],
        sku: Optional[str] = None,
    ) -> List[RawResult]:
        geo = self._geo_filter(longitude, latitude)
        expression = compose(geo.to_query(LOCATION), tag_criteria(PRODUCT_ID, sku) if sku else None)
        logger.info("Searching for availability: %s", expression)
        options = SearchOptions(limit=self.settings.inventory_search_limit)
        page = await asyncio.to_thread(self.executor.execute, self.settings.inventory_index, expression, options)
        return augment(page.results, self.settings)

    async def breweries(self, prefix: str = "") -> List[BrewerySuggestion]:
        return await asyncio.to_thread(
            self.suggestions.breweries,
            self.settings.brewery_suggestion_key,
            prefix,
            self.settings.brewery_fuzzy,
        )

    async def foods(self, prefix: str = "") -> List[str]:
        return await asyncio.to_thread(
            self.suggestions.names,
            self.settings.food_suggestion_key,
            prefix,
            self.settings.food_fuzzy,
        )

    def categories(self) -> List[Category]:
        return self.reference.categories()

    def styles(self, category: str = "") -> List[Style]:
        return self.reference.styles(category)
