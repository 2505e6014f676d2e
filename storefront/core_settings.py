from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "bike_sale"
    POSTGRES_USER: str = "bike"
    POSTGRES_PASSWORD: str = "bike"
    # Full SQLAlchemy URL; takes precedence over the POSTGRES_* parts (e.g. sqlite:// in tests)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: float = 30.0

    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    TOKEN_EXPIRE_HOURS: int = 24
    # Comma-separated emails allowed to manage the catalog and stock
    ADMIN_EMAILS: str = ""

    REQUEST_TIMEOUT_SECONDS: float = 10.0
    DEFAULT_STOCK: int = 0
    SEED_ON_STARTUP: bool = True

    REDIS_URL: Optional[str] = None
    CATALOG_CACHE_TTL: int = 60

    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def admin_emails(self) -> set[str]:
        return {e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()}

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

@lru_cache
def get_settings() -> Settings:
    return Settings()
