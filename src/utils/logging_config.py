"""
JSON logging for the API Lambda.

Every line carries ``service`` and ``environment`` so the dispatch, speech
and dashboard records of one deployment can be filtered together in
CloudWatch Logs Insights. Per-call context goes in ``extra={...}``.
"""

import logging
import os

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "facility-ops"


def get_logger(name: str) -> logging.Logger:
    """Configure a JSON logger once and reuse it; level from ``LOG_LEVEL``."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(levelname)s %(name)s %(message)s %(asctime)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
            static_fields={
                "service": SERVICE_NAME,
                "environment": os.environ.get("ENVIRONMENT", "dev"),
            },
        )
    )
    logger.addHandler(handler)
    logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    logger.propagate = False
    return logger
