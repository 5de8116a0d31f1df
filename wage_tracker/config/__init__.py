"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Application
    # ======================
    APP_ENV: str = "development"
    APP_ID: str = "wage-calc-app"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # ======================
    # Store
    # ======================
    STORE_BACKEND: str = "sql"
    DATABASE_URL: str = "sqlite+aiosqlite:///./wage_tracker.db"
    AUTO_CREATE_TABLES: bool = True

    # ======================
    # Branches
    # ======================
    BRANCHES_FILE: str = "config/branches.yml"

    # ======================
    # Identity
    # ======================
    IDENTITY_TOKEN: Optional[str] = None

    # ======================
    # Sync
    # ======================
    SYNC_RECONNECT_ENABLED: bool = False
    SYNC_RECONNECT_BASE_DELAY: float = 1.0
    SYNC_RECONNECT_MAX_DELAY: float = 30.0

    # ======================
    # Timezone
    # ======================
    TIMEZONE: str = "Asia/Bangkok"

    # ======================
    # Pydantic v2 config
    # ======================
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
