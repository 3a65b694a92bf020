"""HTTP API: POST /search."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from litsearch.aggregator import Aggregator, build_aggregator
from litsearch.backends.http import build_http_client
from litsearch.config import Settings, load_settings
from litsearch.models import InvalidQueryError

logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    prompt: Optional[str] = None


def _failure(status: int, error: str, exc: Exception, settings: Settings) -> JSONResponse:
    body: dict[str, Any] = {"success": False, "error": error}
    if settings.development:
        body["details"] = str(exc)
    return JSONResponse(body, status_code=status)


def create_app(
    settings: Optional[Settings] = None,
    aggregator: Optional[Aggregator] = None,
) -> FastAPI:
    """Build the app. Pass ``aggregator`` to skip building real clients."""
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if aggregator is not None:
            app.state.aggregator = aggregator
            yield
            return
        async with build_http_client(settings) as http_client:
            app.state.aggregator = build_aggregator(settings, http_client)
            logger.info("Search clients ready")
            yield

    app = FastAPI(title="litsearch", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return _failure(500, "An unexpected error occurred", exc, settings)

    @app.get("/health")
    def health():
        return {"status": "ok", "service": "litsearch"}

    @app.options("/search")
    def search_preflight():
        return Response(status_code=200)

    @app.post("/search")
    async def search(request: Request):
        try:
            payload = SearchRequest.model_validate(await request.json())
        except ValueError:
            # Non-JSON body or a prompt that isn't a string
            return JSONResponse(
                {"success": False, "error": "Please enter at least 3 characters"},
                status_code=400,
            )

        try:
            response = await request.app.state.aggregator.search(payload.prompt)
        except InvalidQueryError as e:
            return JSONResponse({"success": False, "error": str(e)}, status_code=400)
        except Exception as e:
            logger.exception("Search failed")
            return _failure(500, "Internal server error", e, settings)

        return response.to_dict()

    return app


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    settings = load_settings()
    host = host or settings.host
    port = port or settings.port
    logger.info("Starting server on %s:%s", host, port)
    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")
