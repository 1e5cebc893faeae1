"""HumanMark - FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from humanmark.api.middleware import install_request_middleware
from humanmark.api.v1.verify import router as verify_router
from humanmark.config import Settings, get_settings
from humanmark.core.errors import AnalysisError, ContentFetchError
from humanmark.core.external.content_fetcher import ContentFetcher
from humanmark.core.orchestrator import DetectionOrchestrator
from humanmark.core.store.result_store import ResultStore
from humanmark.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code})


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("HumanMark API starting (env=%s, store=%s)", app.state.settings.env, app.state.store.backend)
    yield
    await app.state.orchestrator.shutdown()
    await app.state.fetcher.shutdown()
    logger.info("HumanMark API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_output=settings.json_logs)

    app = FastAPI(
        title="HumanMark API",
        description="Multi-modal AI-generated content detection.",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    install_request_middleware(app, settings.rate_limit)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = ResultStore(settings.redis_url or None, ttl=settings.result_ttl)
    app.state.settings = settings
    app.state.store = store
    app.state.orchestrator = DetectionOrchestrator.from_settings(settings, store=store)
    app.state.fetcher = ContentFetcher(
        default_limit=settings.max_upload_size, timeout=float(settings.detector_timeout)
    )

    app.include_router(verify_router, prefix="/api/v1")

    @app.get("/")
    async def index() -> dict[str, Any]:
        return {"name": "HumanMark API", "version": settings.version, "docs": "/docs"}

    @app.get("/health")
    async def health() -> JSONResponse:
        store_ok = await store.ping()
        return JSONResponse(
            status_code=200 if store_ok else 503,
            content={
                "status": "healthy" if store_ok else "degraded",
                "version": settings.version,
                "store": store.backend,
                "store_ok": store_ok,
            },
        )

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
        return _error(400, str(exc), exc.code)

    @app.exception_handler(ContentFetchError)
    async def fetch_error_handler(request: Request, exc: ContentFetchError) -> JSONResponse:
        return _error(400, str(exc), "fetch_failed")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        return _error(400, str(first.get("msg", "invalid request")), "invalid_request")

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail if isinstance(exc.detail, dict) else {"error": str(exc.detail), "code": "http_error"}
        return JSONResponse(status_code=exc.status_code, content=detail)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(500, "internal server error", "internal_error")

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
