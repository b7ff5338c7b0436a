"""
Configuration - Environment-driven settings.

Every setting is read once at import time from an environment variable.
"""

import logging
import os

TABLEHALL_ENV = os.getenv("TABLEHALL_ENV", "development")
TABLEHALL_LOG_LEVEL = os.getenv("TABLEHALL_LOG_LEVEL", "INFO")
DEFAULT_PREFIX = os.getenv("TABLEHALL_DEFAULT_PREFIX", "?")
INACTIVITY_TIMEOUT_SECONDS = int(os.getenv("TABLEHALL_INACTIVITY_TIMEOUT", "600"))
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Set up root logging for a tablehall process."""
    logging.basicConfig(
        level=(level or TABLEHALL_LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
