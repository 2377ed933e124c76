# app/query/engine.py
"""Warehouse client: executes built statements and returns plain rows."""

import logging
from typing import Any, Dict, List, Optional

from anyio import fail_after, to_thread
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.core.exceptions import WarehouseExecutionError
from .builder import InsightQueryBuilder

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class QueryEngine:
    """Runs statements against the data warehouse.

    Created once at startup around a SQLAlchemy engine and shared by every
    request. Each call opens its own session in a worker thread, so requests
    share no mutable state; the event loop stays free while the warehouse works.
    """

    def __init__(self, engine: Engine, timeout: Optional[float] = 30.0):
        self.engine = engine
        self.timeout = timeout

    # ===== EXECUTION =====

    async def fetch_all(self, query: Select) -> List[Row]:
        """Execute ``query`` and return every row as a column-name mapping.

        Any failure, including running past ``timeout`` seconds, is raised as
        WarehouseExecutionError.
        """
        if logger.isEnabledFor(logging.DEBUG):
            compiled = InsightQueryBuilder.to_sql(query, self.engine.dialect)
            logger.debug("Executing warehouse query: %s params=%s", compiled.sql, compiled.parameters)

        try:
            with fail_after(self.timeout):
                # An abandoned worker thread finishes on its own; its result is dropped
                return await to_thread.run_sync(self._execute, query, abandon_on_cancel=True)
        except TimeoutError as e:
            raise WarehouseExecutionError(
                f"Warehouse query timed out after {self.timeout} seconds"
            ) from e
        except WarehouseExecutionError:
            raise
        except Exception as e:
            raise WarehouseExecutionError(str(e)) from e

    async def fetch_first(self, query: Select) -> Optional[Row]:
        """Execute ``query`` and return its first row, or None when empty."""
        rows = await self.fetch_all(query)
        return rows[0] if rows else None

    def _execute(self, query: Select) -> List[Row]:
        with Session(self.engine) as session:
            result = session.execute(query)
            return [dict(row) for row in result.mappings().all()]

    def dispose(self) -> None:
        """Release pooled warehouse connections."""
        self.engine.dispose()
