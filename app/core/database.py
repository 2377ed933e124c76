# app/core/database.py
"""Data warehouse engine construction.

The warehouse is reached through SQLAlchemy. In production the URL is a
``bigquery://project/dataset`` URL handled by the sqlalchemy-bigquery dialect;
any other SQLAlchemy URL (SQLite for local development and tests) works too.
"""

import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from app.core.config import Settings

logger = logging.getLogger(__name__)

# ===== DATA WAREHOUSE DATABASE =====
# Holds the seller listing insights written by the upstream ingestion job.
DWBase = declarative_base()


def create_dw_engine(settings: Settings) -> Engine:
    """Create the warehouse engine described by ``settings``."""
    url = settings.warehouse_url

    if settings.is_bigquery:
        engine_kwargs = {}
        if os.path.exists(settings.bigquery_credentials_path):
            engine_kwargs["credentials_path"] = settings.bigquery_credentials_path
        else:
            # Fall back to application default credentials
            logger.warning(
                "Service account file %s not found, using default credentials",
                settings.bigquery_credentials_path,
            )
        engine = create_engine(url, **engine_kwargs)
    else:
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
        )

    logger.info("Data warehouse engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def create_dw_tables(engine: Engine) -> None:
    """Create warehouse tables. Only meant for local SQLite warehouses."""
    # Import models to ensure they're registered with DWBase
    from app.insights.models import SellerListingInsight  # noqa: F401

    DWBase.metadata.create_all(bind=engine)
