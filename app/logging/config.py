"""Process-wide logging configuration."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once at startup. Safe to call repeatedly."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not any(getattr(handler, "_insights_handler", False) for handler in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._insights_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # uvicorn installs its own access log; ours comes from the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
