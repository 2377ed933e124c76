"""Pydantic schemas for the insights module."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase keys while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Insight Schemas
class InsightRead(CamelModel):
    id: str
    timestamp: datetime
    environment: str
    empty_prompt: Optional[str] = None
    rendered_prompt: Optional[str] = None
    model_name: str
    input_tokens: int
    output_tokens: int
    customer_id: Optional[str] = None
    client_id: Optional[str] = None
    listing_id: str
    home_id: Optional[str] = None
    input_payload: Optional[str] = None
    output_payload: Optional[str] = None

    # "model_" is a protected namespace in pydantic; modelName is a real column
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        protected_namespaces=(),
    )


class Pagination(BaseModel):
    limit: int
    offset: int
    total: int


class InsightListResponse(BaseModel):
    data: List[InsightRead]
    pagination: Pagination


class InsightStats(CamelModel):
    total_records: int
    unique_listings: int
    unique_customers: int
    total_input_tokens: int
    total_output_tokens: int
    avg_input_tokens: float
    avg_output_tokens: float


class HealthStatus(BaseModel):
    status: str
    service: str
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
