"""Application configuration read from the environment."""

import os
from typing import Literal

from pydantic import BaseModel

from app.utils.logging import LogConfig


class AppConfig(BaseModel):
    """Runtime configuration."""

    store: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite+aiosqlite:///./patients.db"
    database_echo: bool = False
    log: LogConfig = LogConfig()


def load_config() -> AppConfig:
    """Build configuration from PATIENT_STORE, DATABASE_URL, DATABASE_ECHO and LOG_LEVEL."""
    defaults = AppConfig()
    return AppConfig.model_validate(
        {
            "store": os.getenv("PATIENT_STORE", defaults.store),
            "database_url": os.getenv("DATABASE_URL", defaults.database_url),
            "database_echo": os.getenv("DATABASE_ECHO", str(defaults.database_echo).lower()),
            "log": {"level": os.getenv("LOG_LEVEL", defaults.log.level)},
        }
    )
