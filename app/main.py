"""FastAPI application wiring the query service."""
from __future__ import annotations

import asyncio
import logging
import uuid
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, Query, Request, Response

from .config import settings
from .errors import setup_error_handlers
from .executor import RawResult, SearchExecutor
from .interactions import InteractionDispatcher, RedisStreamRecorder
from .models import BrewerySuggestion, Category, ProductQuery, ResultsPage, Style
from .redis_client import get_client
from .reference import load_reference_data
from .service import QueryService
from .suggestions import SuggestionService

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

# ``force=True`` replaces uvicorn's default handlers so every module logs
# with the same format.
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "redis"):
    logging.getLogger(name).setLevel(LOG_LEVEL)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s", settings.log_level.upper())

app = FastAPI(title="Brewery Product Discovery Service")
setup_error_handlers(app)


@lru_cache(maxsize=1)
def get_service() -> QueryService:
    settings.validate()
    client = get_client()
    recorder = RedisStreamRecorder(client, settings.interaction_stream, settings.interaction_stream_maxlen)
    return QueryService(
        settings=settings,
        executor=SearchExecutor(client),
        suggestions=SuggestionService(client, max_results=settings.suggestion_max),
        dispatcher=InteractionDispatcher(
            recorder, max_workers=settings.interaction_workers, max_pending=settings.interaction_max_pending
        ),
        reference=load_reference_data(settings.reference_data_path),
    )


@app.on_event("startup")
async def startup_event() -> None:
    service = get_service()
    logger.info(
        "Serving products=%s stores=%s inventory=%s with %s categories",
        service.settings.product_index,
        service.settings.store_index,
        service.settings.inventory_index,
        len(service.categories()),
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    if get_service.cache_info().currsize:
        get_service().dispatcher.shutdown(wait=True)


@app.get("/health")
async def health() -> dict:
    client = get_client()
    alive = await asyncio.to_thread(client.ping)
    return {"redis": "ok" if alive else "down", "products": settings.product_index}


def _session_id(request: Request, response: Response) -> str:
    session_id = request.cookies.get(settings.session_cookie)
    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(settings.session_cookie, session_id, httponly=True)
    return session_id


@app.post("/api/products", response_model=ResultsPage)
async def products(
    query: ProductQuery,
    request: Request,
    response: Response,
    longitude: float = Query(...),
    latitude: float = Query(...),
    service: QueryService = Depends(get_service),
) -> ResultsPage:
    return await service.search_products(query, longitude, latitude, _session_id(request, response))


@app.get("/api/inventory")
async def inventory(store: str | None = None, service: QueryService = Depends(get_service)) -> List[RawResult]:
    return await service.inventory(store)


@app.get("/api/availability")
async def availability(
    longitude: float = Query(...),
    latitude: float = Query(...),
    sku: str | None = None,
    service: QueryService = Depends(get_service),
) -> List[RawResult]:
    return await service.availability(longitude, latitude, sku)


@app.get("/api/styles", response_model=List[Style])
async def styles(category: str = "", service: QueryService = Depends(get_service)) -> List[Style]:
    return service.styles(category)


@app.get("/api/categories", response_model=List[Category])
async def categories(service: QueryService = Depends(get_service)) -> List[Category]:
    return service.categories()


@app.get("/api/breweries", response_model=List[BrewerySuggestion])
async def breweries(prefix: str = "", service: QueryService = Depends(get_service)) -> List[BrewerySuggestion]:
    return await service.breweries(prefix)


@app.get("/api/foods", response_model=List[str])
async def foods(prefix: str = "", service: QueryService = Depends(get_service)) -> List[str]:
    return await service.foods(prefix)
