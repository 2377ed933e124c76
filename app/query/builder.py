"""
InsightQueryBuilder: the single place where warehouse statements are built.

Every user-supplied value reaches the warehouse as a bound parameter of a
SQLAlchemy statement, never as text spliced into SQL. The listing data query
and its count query are built from one predicate list so ``total`` always
describes the same rows the page was cut from.
"""

from typing import Any, Dict, List, Tuple

from sqlalchemy import distinct, func, literal, select
from sqlalchemy.engine import Dialect
from sqlalchemy.sql import Select
from sqlalchemy.sql.elements import ColumnElement

from app.insights.models import SellerListingInsight
from .schemas import FilterField, FilterRequest, InsightFilters, QueryResult


class InsightQueryBuilder:
    """Builds the statements behind every insights endpoint."""

    def __init__(self, model: Any = SellerListingInsight):
        self.model = model
        self.table = model.__table__
        self._filter_columns = {
            FilterField.ENVIRONMENT: model.environment,
            FilterField.LISTING_ID: model.listing_id,
            FilterField.CUSTOMER_ID: model.customer_id,
        }

    def build_predicates(self, filters: InsightFilters) -> List[ColumnElement]:
        """Equality predicates for the active filters, in emission order."""
        return [self._filter_columns[name] == value for name, value in filters.items()]

    def build_list_queries(self, request: FilterRequest) -> Tuple[Select, Select]:
        """
        Build the paginated data query and its matching count query.

        Both statements share the same predicates; only the data query is
        ordered (newest first) and windowed.
        """
        predicates = self.build_predicates(request.filters)

        data_query = (
            select(self.table)
            .where(*predicates)
            .order_by(self.model.timestamp.desc())
            .limit(request.limit)
            .offset(request.offset)
        )
        count_query = select(func.count().label("total")).select_from(self.table).where(*predicates)

        return data_query, count_query

    def build_get_by_id(self, insight_id: str) -> Select:
        """Exact-match lookup of one insight."""
        return select(self.table).where(self.model.id == insight_id).limit(1)

    def build_environments(self) -> Select:
        """Distinct environment values, sorted."""
        return select(self.model.environment).distinct().order_by(self.model.environment)

    def build_stats(self) -> Select:
        """Whole-table aggregates. No filters are applied."""
        model = self.model
        return select(
            func.count().label("totalRecords"),
            func.count(distinct(model.listing_id)).label("uniqueListings"),
            func.count(distinct(model.customer_id)).label("uniqueCustomers"),
            func.sum(model.input_tokens).label("totalInputTokens"),
            func.sum(model.output_tokens).label("totalOutputTokens"),
            func.avg(model.input_tokens).label("avgInputTokens"),
            func.avg(model.output_tokens).label("avgOutputTokens"),
        ).select_from(self.table)

    def build_health_check(self) -> Select:
        """Cheapest statement that still touches the insights table."""
        return select(literal(1).label("ok")).select_from(self.table).limit(1)

    @staticmethod
    def to_sql(query: Select, dialect: Dialect) -> QueryResult:
        """Compile a statement to placeholder SQL plus its parameters.

        Bound values are kept out of the SQL text, so the result is safe to log.
        """
        compiled = query.compile(dialect=dialect)
        parameters: Dict[str, Any] = dict(compiled.params)
        return QueryResult(sql=str(compiled), parameters=parameters)
