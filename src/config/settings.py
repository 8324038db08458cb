"""
Application Settings

Read from environment variables (a .env file is loaded by main.py
before anything else is imported).
"""

import os
from dataclasses import dataclass
from functools import lru_cache


DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "data", "engagement.db")
DEV_AUTH_SECRET = "engagement-drift-dev-secret-change-in-production"


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    db_path: str = DEFAULT_DB_PATH
    window_days: int = 14
    default_language: str = "en"
    auth_secret: str = DEV_AUTH_SECRET
    token_expiry_hours: int = 24
    log_level: str = "INFO"
    monitoring_log_dir: str = "logs"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            db_path=os.getenv("DRIFT_DB_PATH", DEFAULT_DB_PATH),
            window_days=int(os.getenv("DRIFT_WINDOW_DAYS", "14")),
            default_language=os.getenv("DEFAULT_LANGUAGE", "en"),
            auth_secret=os.getenv("AUTH_SECRET", DEV_AUTH_SECRET),
            token_expiry_hours=int(os.getenv("TOKEN_EXPIRY_HOURS", "24")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            monitoring_log_dir=os.getenv("MONITORING_LOG_DIR", "logs"),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Settings for this process (read once)."""
    return Settings.from_env()
