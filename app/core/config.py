# app/core/config.py
"""Environment-driven settings for the insights API."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read once from the environment."""

    bigquery_project: str = "mobile-staging-376418"
    bigquery_dataset: str = "ai_history"
    bigquery_credentials_path: str = "service-account.json"
    data_warehouse_url: Optional[str] = None
    warehouse_query_timeout: float = 30.0
    max_page_limit: int = 1000
    log_level: str = "INFO"
    application_id: str = "Unknown"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def warehouse_url(self) -> str:
        """SQLAlchemy URL of the warehouse; an explicit DATA_WAREHOUSE_URL wins."""
        if self.data_warehouse_url:
            return self.data_warehouse_url
        return f"bigquery://{self.bigquery_project}/{self.bigquery_dataset}"

    @property
    def is_bigquery(self) -> bool:
        return self.warehouse_url.startswith("bigquery://")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            bigquery_project=os.getenv("BIGQUERY_PROJECT", cls.bigquery_project),
            bigquery_dataset=os.getenv("BIGQUERY_DATASET", cls.bigquery_dataset),
            bigquery_credentials_path=os.getenv(
                "BIGQUERY_CREDENTIALS_PATH", cls.bigquery_credentials_path
            ),
            data_warehouse_url=os.getenv("DATA_WAREHOUSE_URL") or None,
            warehouse_query_timeout=float(
                os.getenv("WAREHOUSE_QUERY_TIMEOUT", str(cls.warehouse_query_timeout))
            ),
            max_page_limit=int(os.getenv("MAX_PAGE_LIMIT", str(cls.max_page_limit))),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            application_id=os.getenv("APPLICATION_ID", cls.application_id),
            host=os.getenv("HOST", cls.host),
            port=int(os.getenv("PORT", str(cls.port))),
            cors_allow_origins=_split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*")),
        )


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings."""
    return Settings.from_env()
