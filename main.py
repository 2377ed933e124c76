#!/usr/bin/env python3
import logging

import uvicorn

from app.app import create_app
from app.core.config import get_settings
from app.logging.config import setup_logging

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create the FastAPI app
app = create_app(settings=settings)


if __name__ == "__main__":
    logger.info("Server running at http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
