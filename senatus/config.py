"""
Configuration - Environment settings for the service and CLI.

Environment variables:
    SENATUS_ENV         development | production (default: development)
    SENATUS_SEED        Default deck seed for new games (default: random)
    SENATUS_LOG_LEVEL   Logging level name (default: INFO)
    ALLOWED_ORIGINS     Comma-separated CORS origins (default: *)
    SENATUS_HOST        Bind host for `senatus serve` (default: 127.0.0.1)
    SENATUS_PORT        Bind port for `senatus serve` (default: 8000)
"""

import logging
import os

SENATUS_ENV = os.getenv("SENATUS_ENV", "development")
SENATUS_LOG_LEVEL = os.getenv("SENATUS_LOG_LEVEL", "INFO")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
SENATUS_HOST = os.getenv("SENATUS_HOST", "127.0.0.1")
SENATUS_PORT = int(os.getenv("SENATUS_PORT", "8000"))

_seed = os.getenv("SENATUS_SEED")
SENATUS_SEED = int(_seed) if _seed not in (None, "") else None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once, from the argument or SENATUS_LOG_LEVEL."""
    level_name = (level or SENATUS_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
