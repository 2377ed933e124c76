# app/insights/__init__.py

from .models import SellerListingInsight
from .schemas import InsightRead, InsightListResponse, InsightStats, Pagination

__all__ = [
    # Models
    "SellerListingInsight",

    # Schemas
    "InsightRead",
    "InsightListResponse",
    "InsightStats",
    "Pagination",
]
