# app/config.py
from __future__ import annotations

import logging.config
import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class Settings:
    """Runtime configuration pulled from environment variables."""

    # Base URL of the external ML service; "" leaves every call unroutable.
    ml_api_url: str = os.getenv("ML_API_URL", "")
    ml_api_timeout: float = float(os.getenv("ML_API_TIMEOUT", "60"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings are computed once per process."""
    return Settings()


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "app": {"handlers": ["console"], "level": settings.log_level},
            },
        }
    )
