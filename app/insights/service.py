# app/insights/service.py
"""Service layer for the insights module."""

import logging
from datetime import datetime
from typing import Any, Dict, List

from anyio import create_task_group
from pydantic import ValidationError
from sqlalchemy.sql import Select

from app.core.exceptions import InsightNotFoundError, ResultCoercionError
from app.insights.schemas import HealthStatus, InsightListResponse, InsightRead, InsightStats, Pagination
from app.query import FilterRequest, InsightQueryBuilder, QueryEngine
from app.utils import coerce_average, coerce_count

logger = logging.getLogger(__name__)

_COUNT_FIELDS = (
    "totalRecords",
    "uniqueListings",
    "uniqueCustomers",
    "totalInputTokens",
    "totalOutputTokens",
)
_AVERAGE_FIELDS = ("avgInputTokens", "avgOutputTokens")


class InsightService:
    """Read-only access to seller listing insights."""

    def __init__(self, engine: QueryEngine, builder: InsightQueryBuilder):
        self.engine = engine
        self.builder = builder

    def _to_response(self, row: Dict[str, Any]) -> InsightRead:
        """Convert a warehouse row to InsightRead schema."""
        try:
            return InsightRead.model_validate(row)
        except ValidationError as e:
            raise ResultCoercionError(f"Malformed insight row {row.get('id')!r}: {e}") from e

    async def _fetch_concurrently(self, *queries: Select) -> List[List[Dict[str, Any]]]:
        """Run ``queries`` side by side. The first failure cancels the rest and is re-raised."""
        results: List[Any] = [None] * len(queries)
        errors: List[Exception] = []

        async with create_task_group() as tg:

            async def run(index: int, query: Select) -> None:
                try:
                    results[index] = await self.engine.fetch_all(query)
                except Exception as e:
                    errors.append(e)
                    tg.cancel_scope.cancel()

            for index, query in enumerate(queries):
                tg.start_soon(run, index, query)

        if errors:
            raise errors[0]
        return results

    async def list_insights(self, request: FilterRequest) -> InsightListResponse:
        """Get one page of insights plus the total matching the same filters."""
        data_query, count_query = self.builder.build_list_queries(request)

        rows, count_rows = await self._fetch_concurrently(data_query, count_query)
        total = coerce_count(count_rows[0].get("total") if count_rows else 0, "total")

        return InsightListResponse(
            data=[self._to_response(row) for row in rows],
            pagination=Pagination(limit=request.limit, offset=request.offset, total=total),
        )

    async def get_insight(self, insight_id: str) -> InsightRead:
        """Get a single insight by id."""
        row = await self.engine.fetch_first(self.builder.build_get_by_id(insight_id))
        if row is None:
            raise InsightNotFoundError()
        return self._to_response(row)

    async def get_environments(self) -> List[str]:
        """Get unique environment names, sorted."""
        rows = await self.engine.fetch_all(self.builder.build_environments())
        return sorted({row["environment"] for row in rows if row.get("environment") is not None})

    async def get_stats(self) -> InsightStats:
        """Get whole-table usage statistics."""
        row = await self.engine.fetch_first(self.builder.build_stats()) or {}

        values: Dict[str, Any] = {name: coerce_count(row.get(name), name) for name in _COUNT_FIELDS}
        values.update({name: coerce_average(row.get(name), name) for name in _AVERAGE_FIELDS})
        return InsightStats.model_validate(values)

    async def check_health(self) -> HealthStatus:
        """Probe the warehouse; raises WarehouseExecutionError when it is unreachable."""
        await self.engine.fetch_all(self.builder.build_health_check())
        return HealthStatus(
            status="healthy",
            service="insights",
            timestamp=datetime.now().isoformat(),
        )
