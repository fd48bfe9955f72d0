from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Library API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "A Rest API for managing library book records"

    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/library"
    DB_CREATE_TABLES: bool = True

    # Database Pool Settings
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_TIMEOUT: int = 30

    # --- Redis Configuration ---
    REDIS_URL: Optional[str] = None
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 15 * 60

    # --- HTTP ---
    CORS_ORIGINS: str = "*"
    LOGGING_EXCLUDE_PATHS: set[str] = {"/health", "/favicon.ico"}

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cache_configured(self) -> bool:
        return self.CACHE_ENABLED and bool(self.REDIS_URL)


settings = Settings()
