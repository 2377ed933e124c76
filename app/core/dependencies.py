# app/core/dependencies.py
"""Request-scoped dependencies built from the components created at startup."""

from typing import Annotated

from fastapi import Depends, Request

from app.core.config import Settings
from app.query import InsightQueryBuilder, QueryEngine


def get_query_engine(request: Request) -> QueryEngine:
    """The warehouse client created by create_app()."""
    return request.app.state.query_engine


def get_app_settings(request: Request) -> Settings:
    """The settings the app was created with."""
    return request.app.state.settings


def get_query_builder() -> InsightQueryBuilder:
    return InsightQueryBuilder()


# Core dependencies
QueryEngineDep = Annotated[QueryEngine, Depends(get_query_engine)]
QueryBuilderDep = Annotated[InsightQueryBuilder, Depends(get_query_builder)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def get_insight_service(engine: QueryEngineDep, builder: QueryBuilderDep):
    """Get insight service bound to the shared warehouse client"""
    from app.insights.service import InsightService

    return InsightService(engine, builder)
