"""FastAPI application entry point for the seller listing insights API."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

from app.core.config import Settings, get_settings
from app.core.database import create_dw_engine
from app.core.exceptions import InsightsAPIError
from app.core.router import register_routes
from app.logging.exception_handlers import (
    general_exception_handler,
    http_exception_handler,
    insights_api_exception_handler,
    request_validation_exception_handler,
    response_validation_exception_handler,
)
from app.logging.middleware import RequestLoggingMiddleware
from app.query import QueryEngine


def create_app(
    query_engine: Optional[QueryEngine] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the application around a warehouse client.

    When ``query_engine`` is omitted one is created from ``settings`` and its
    connections are released on shutdown. An injected engine is left to its owner.
    """
    settings = settings or get_settings()
    owns_engine = query_engine is None
    if query_engine is None:
        query_engine = QueryEngine(
            create_dw_engine(settings), timeout=settings.warehouse_query_timeout
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        if owns_engine:
            app.state.query_engine.dispose()

    app = FastAPI(
        title="Seller Listing Insights API",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.query_engine = query_engine
    app.state.settings = settings

    # Add request logger middleware
    app.add_middleware(RequestLoggingMiddleware, application_id=settings.application_id)

    app.add_exception_handler(InsightsAPIError, insights_api_exception_handler)
    app.add_exception_handler(ResponseValidationError, response_validation_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_routes(app)

    return app
