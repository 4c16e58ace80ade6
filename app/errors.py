"""Client-facing request errors and their FastAPI handlers."""
from __future__ import annotations

import logging

import redis
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ClientRequestError(Exception):
    """Raised before any store call when a request cannot be served."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class MissingParameterError(ClientRequestError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required parameter: {name}", details={"parameter": name})


class InvalidParameterError(ClientRequestError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Invalid parameter {name}: {reason}", details={"parameter": name})


def _error_body(message: str, kind: str, details: dict) -> dict:
    return {"error": {"message": message, "type": kind, "details": details}}


def setup_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClientRequestError)
    async def client_request_handler(request: Request, exc: ClientRequestError) -> JSONResponse:
        logger.warning("Rejected %s: %s", request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.__class__.__name__, exc.details),
        )

    @app.exception_handler(redis.RedisError)
    async def store_error_handler(request: Request, exc: redis.RedisError) -> JSONResponse:
        logger.error("Store error on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body("Search backend error", exc.__class__.__name__, {}),
        )
