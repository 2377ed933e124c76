"""
Test configuration and shared fixtures for the insights API test suite.
Provides an in-memory warehouse, sample data, and app clients.
"""

import pytest
from datetime import datetime, timedelta
from typing import Generator, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.app import create_app
from app.core.config import Settings
from app.core.database import DWBase
from app.core.exceptions import WarehouseExecutionError
from app.insights.models import SellerListingInsight
from app.query import QueryEngine


BASE_TIME = datetime(2024, 6, 1, 12, 0, 0)


# ===== WAREHOUSE SETUP =====

@pytest.fixture
def dw_engine():
    """Create in-memory SQLite engine standing in for the warehouse"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    DWBase.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def dw_db_session(dw_engine) -> Generator[Session, None, None]:
    """Create a session for seeding the warehouse"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=dw_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def query_engine(dw_engine) -> QueryEngine:
    return QueryEngine(dw_engine, timeout=5)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(data_warehouse_url="sqlite://", max_page_limit=1000)


@pytest.fixture
def client(query_engine, test_settings) -> Generator[TestClient, None, None]:
    """Create FastAPI test client around the in-memory warehouse"""
    app = create_app(query_engine=query_engine, settings=test_settings)
    with TestClient(app) as test_client:
        yield test_client


# ===== FAILING WAREHOUSE =====

class FailingQueryEngine(QueryEngine):
    """Warehouse client whose every call fails like an unreachable warehouse."""

    def __init__(self, message: str = "403 Access Denied: BigQuery quota exceeded"):
        super().__init__(engine=None, timeout=None)
        self.message = message
        self.calls = 0

    async def fetch_all(self, query):
        self.calls += 1
        raise WarehouseExecutionError(self.message)


@pytest.fixture
def failing_engine() -> FailingQueryEngine:
    return FailingQueryEngine()


@pytest.fixture
def failing_client(failing_engine, test_settings) -> Generator[TestClient, None, None]:
    app = create_app(query_engine=failing_engine, settings=test_settings)
    with TestClient(app) as test_client:
        yield test_client


# ===== SAMPLE DATA FIXTURES =====

def make_insight(index: int, **overrides) -> SellerListingInsight:
    values = dict(
        id=f"insight-{index:03d}",
        timestamp=BASE_TIME + timedelta(hours=index),
        environment="production",
        empty_prompt="Describe listing {listingId}",
        rendered_prompt=f"Describe listing listing-{index % 3}",
        model_name="gpt-4o",
        input_tokens=100 * index,
        output_tokens=10 * index,
        customer_id=f"customer-{index % 2}",
        client_id=None,
        listing_id=f"listing-{index % 3}",
        home_id=None,
        input_payload='{"photos": 3}',
        output_payload='{"summary": "ok"}',
    )
    values.update(overrides)
    return SellerListingInsight(**values)


@pytest.fixture
def sample_insights(dw_db_session) -> List[SellerListingInsight]:
    """Create sample insights for testing

    Ten rows, insight-001 oldest to insight-010 newest. Environments:
    production x6, staging x3, development x1. Customers alternate; the
    last row has no customer.
    """
    environments = ["production"] * 6 + ["staging"] * 3 + ["development"]
    insights = []
    for index in range(1, 11):
        overrides = {"environment": environments[index - 1]}
        if index == 10:
            overrides["customer_id"] = None
        insights.append(make_insight(index, **overrides))

    dw_db_session.add_all(insights)
    dw_db_session.commit()
    return insights


@pytest.fixture
def insight_factory():
    """Build unsaved insights with sensible defaults"""
    return make_insight
