from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    # App Settings
    APP_NAME: str = "Invoicing Service"
    PROJECT_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: str = "*"  # Comma-separated string or "*"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = False
    RATE_LIMIT_DEFAULT: str = "100/minute"

    DATABASE_URL: str = "sqlite+aiosqlite:///./invoicing.db"

    # Cache
    CACHE_TYPE: str = "inmemory"  # inmemory, redis, or database
    REDIS_URL: str | None = None
    CACHE_EXPIRE_SECONDS: int = 300
    CACHE_WARM_ON_STARTUP: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Parse ALLOWED_ORIGINS
    @property
    def allowed_origins_list(self) -> List[str]:
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def cache_config_valid(self) -> bool:
        return self.CACHE_TYPE.lower() != "redis" or bool(self.REDIS_URL)


settings = Settings()

if not settings.cache_config_valid:
    raise ValueError("REDIS_URL must be set in .env when CACHE_TYPE=redis.")
