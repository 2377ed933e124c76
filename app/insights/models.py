"""Database models for the insights module (data warehouse database)."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import DWBase as Base


class SellerListingInsight(Base):
    """One AI insight generated for a seller listing.

    Rows are written by the ingestion pipeline; this service only reads them.
    Column names are camelCase in the warehouse and are exposed as-is in JSON.
    """

    __tablename__ = "seller_listing_insights"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    environment: Mapped[str] = mapped_column(String, nullable=False)
    empty_prompt: Mapped[Optional[str]] = mapped_column("emptyPrompt", Text, nullable=True)
    rendered_prompt: Mapped[Optional[str]] = mapped_column("renderedPrompt", Text, nullable=True)
    model_name: Mapped[str] = mapped_column("modelName", String, nullable=False)
    input_tokens: Mapped[int] = mapped_column("inputTokens", Integer, nullable=False, default=0)
    output_tokens: Mapped[int] = mapped_column("outputTokens", Integer, nullable=False, default=0)
    customer_id: Mapped[Optional[str]] = mapped_column("customerId", String, nullable=True)
    client_id: Mapped[Optional[str]] = mapped_column("clientId", String, nullable=True)
    listing_id: Mapped[str] = mapped_column("listingId", String, nullable=False)
    home_id: Mapped[Optional[str]] = mapped_column("homeId", String, nullable=True)
    input_payload: Mapped[Optional[str]] = mapped_column("inputPayload", Text, nullable=True)
    output_payload: Mapped[Optional[str]] = mapped_column("outputPayload", Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SellerListingInsight id={self.id!r} environment={self.environment!r}>"
