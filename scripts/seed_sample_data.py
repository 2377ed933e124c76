#!/usr/bin/env python3
"""Script to create sample seller listing insights in a local SQLite warehouse.

Usage:
    DATA_WAREHOUSE_URL=sqlite:///./insights_dev.db python scripts/seed_sample_data.py [count]
"""

import json
import logging
import os
import random
import sys
import uuid
from datetime import datetime, timedelta

# Add the project root to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import create_dw_engine, create_dw_tables
from app.insights.models import SellerListingInsight
from app.logging.config import setup_logging

logger = logging.getLogger("seed_sample_data")

ENVIRONMENTS = ["production", "staging", "development"]
MODELS = ["gpt-4o", "gpt-4o-mini", "claude-3-5-sonnet"]
PROMPT_TEMPLATE = "Summarize the strengths of listing {listingId} for the seller."


def build_insight(index: int, now: datetime) -> SellerListingInsight:
    listing_id = f"listing-{random.randint(1, 40):04d}"
    customer_id = f"customer-{random.randint(1, 15):03d}" if random.random() > 0.2 else None
    input_tokens = random.randint(200, 4000)
    output_tokens = random.randint(50, 1200)
    input_payload = {"listingId": listing_id, "photos": random.randint(0, 30)}
    output_payload = {"summary": f"Sample insight #{index} for {listing_id}"}

    return SellerListingInsight(
        id=str(uuid.uuid4()),
        timestamp=now - timedelta(minutes=index * 17),
        environment=random.choice(ENVIRONMENTS),
        empty_prompt=PROMPT_TEMPLATE,
        rendered_prompt=PROMPT_TEMPLATE.format(listingId=listing_id),
        model_name=random.choice(MODELS),
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        customer_id=customer_id,
        client_id=f"client-{random.randint(1, 5)}" if customer_id else None,
        listing_id=listing_id,
        home_id=f"home-{random.randint(1, 60):04d}" if random.random() > 0.5 else None,
        input_payload=json.dumps(input_payload),
        output_payload=json.dumps(output_payload),
    )


def create_sample_data(count: int = 250) -> None:
    """Replace the local insights table contents with ``count`` sample rows."""
    settings = get_settings()
    if settings.is_bigquery:
        raise SystemExit("Refusing to seed BigQuery; set DATA_WAREHOUSE_URL to a local database")

    engine = create_dw_engine(settings)
    create_dw_tables(engine)

    now = datetime.now().replace(microsecond=0)
    with Session(engine) as session:
        # Clear existing data first
        logger.info("Clearing existing insights...")
        session.execute(delete(SellerListingInsight))

        logger.info("Creating %d sample insights...", count)
        session.add_all(build_insight(index, now) for index in range(count))
        session.commit()

    engine.dispose()
    logger.info("Sample data created successfully")


if __name__ == "__main__":
    setup_logging("INFO")
    create_sample_data(int(sys.argv[1]) if len(sys.argv) > 1 else 250)
