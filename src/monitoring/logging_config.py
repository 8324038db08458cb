"""
Logging Setup

Configures the root logger once at application start. Modules use
logging.getLogger(__name__) and never configure handlers themselves.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that are noisy at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx")


def setup_logging(level: str = "INFO") -> None:
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
