"""App settings: loaded from environment variables with defaults."""

import os
from typing import List
from dotenv import load_dotenv
from napwise.core.constants import (
    DEFAULT_BABY_AGE_MONTHS as _DEFAULT_BABY_AGE,
    DEFAULT_KID_SLEEP_GOAL_HOURS as _DEFAULT_KID_GOAL,
    DEFAULT_PARENT_SLEEP_GOAL_HOURS as _DEFAULT_PARENT_GOAL,
)

load_dotenv()


class Settings:
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./napwise.db")

    CORS_ORIGINS: List[str] = [
        "http://localhost:8081",
        "http://127.0.0.1:8081",
        "http://localhost:19006",
    ]
    CORS_EXTRA_ORIGINS: str = os.getenv("CORS_EXTRA_ORIGINS", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Seed values for a fresh log; overridden by whatever is saved through /settings
    DEFAULT_BABY_AGE_MONTHS: float = float(os.getenv("DEFAULT_BABY_AGE_MONTHS", str(_DEFAULT_BABY_AGE)))
    KID_SLEEP_GOAL_HOURS: float = float(os.getenv("KID_SLEEP_GOAL_HOURS", str(_DEFAULT_KID_GOAL)))
    PARENT_SLEEP_GOAL_HOURS: float = float(os.getenv("PARENT_SLEEP_GOAL_HOURS", str(_DEFAULT_PARENT_GOAL)))


settings = Settings()
