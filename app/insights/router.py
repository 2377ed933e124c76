# app/insights/router.py
"""API router for the insights module.

Every endpoint owns its error handling: errors are caught here, logged with
the endpoint and its inputs, and returned as ``{"error", "details"}``.
"""

import logging
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from app.core.dependencies import SettingsDep, get_insight_service
from app.core.exceptions import InsightsAPIError, InvalidParameterError, WarehouseExecutionError
from app.insights.params import build_filter_request
from app.insights.schemas import ErrorResponse, HealthStatus, InsightListResponse, InsightRead, InsightStats
from app.insights.service import InsightService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Insights"])

_SERVER_ERROR = {500: {"model": ErrorResponse}}


def _error_response(exc: InsightsAPIError, error: Optional[str] = None) -> JSONResponse:
    body = exc.to_response_body()
    if error is not None:
        body["error"] = error
    return JSONResponse(status_code=exc.status_code, content=body)


# ===== INSIGHT ENDPOINTS =====

@router.get(
    "/insights",
    response_model=InsightListResponse,
    responses={400: {"model": ErrorResponse}, **_SERVER_ERROR},
)
async def list_insights(
    settings: SettingsDep,
    limit: Optional[str] = Query(None, description="Page size, 1 to MAX_PAGE_LIMIT (default 100)"),
    offset: Optional[str] = Query(None, description="Rows to skip (default 0)"),
    environment: Optional[str] = Query(None, description="Filter by environment"),
    listing_id: Optional[str] = Query(None, alias="listingId", description="Filter by listing ID"),
    customer_id: Optional[str] = Query(None, alias="customerId", description="Filter by customer ID"),
    service: InsightService = Depends(get_insight_service),
) -> Union[InsightListResponse, JSONResponse]:
    """Get insights, newest first, with optional equality filters."""
    try:
        request = build_filter_request(
            limit=limit,
            offset=offset,
            environment=environment,
            listing_id=listing_id,
            customer_id=customer_id,
            max_limit=settings.max_page_limit,
        )
    except InvalidParameterError as e:
        logger.info("Rejected insights request: %s", e.details)
        return _error_response(e)

    try:
        return await service.list_insights(request)
    except WarehouseExecutionError as e:
        logger.exception(
            "Error fetching insights (limit=%s offset=%s filters=%s)",
            request.limit,
            request.offset,
            request.filters.as_dict(),
        )
        return _error_response(e, "Failed to fetch insights")


@router.get(
    "/insights/{insight_id}",
    response_model=InsightRead,
    responses={404: {"model": ErrorResponse}, **_SERVER_ERROR},
)
async def get_insight(
    insight_id: str,
    service: InsightService = Depends(get_insight_service),
) -> Union[InsightRead, JSONResponse]:
    """Get a single insight by ID."""
    try:
        return await service.get_insight(insight_id)
    except WarehouseExecutionError as e:
        logger.exception("Error fetching insight %r", insight_id)
        return _error_response(e, "Failed to fetch insight")
    except InsightsAPIError as e:
        return _error_response(e)


# ===== UTILITY ENDPOINTS =====

@router.get("/environments", response_model=List[str], responses=_SERVER_ERROR)
async def get_environments(
    service: InsightService = Depends(get_insight_service),
) -> Union[List[str], JSONResponse]:
    """Get unique environments for filtering."""
    try:
        return await service.get_environments()
    except WarehouseExecutionError as e:
        logger.exception("Error fetching environments")
        return _error_response(e, "Failed to fetch environments")


@router.get("/stats", response_model=InsightStats, responses=_SERVER_ERROR)
async def get_stats(
    service: InsightService = Depends(get_insight_service),
) -> Union[InsightStats, JSONResponse]:
    """Get token and volume statistics across all insights."""
    try:
        return await service.get_stats()
    except WarehouseExecutionError as e:
        logger.exception("Error fetching stats")
        return _error_response(e, "Failed to fetch stats")


# ===== HEALTH CHECK ENDPOINT =====

@router.get("/health", response_model=HealthStatus, responses={503: {"model": ErrorResponse}})
async def health_check(
    service: InsightService = Depends(get_insight_service),
) -> Union[HealthStatus, JSONResponse]:
    """Health check endpoint for the warehouse connection."""
    try:
        return await service.check_health()
    except WarehouseExecutionError as e:
        logger.warning("Warehouse health check failed: %s", e.details)
        body: Dict[str, Optional[str]] = {"error": "Warehouse unavailable", "details": e.details}
        return JSONResponse(status_code=503, content=body)
