from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "storefront"
    POSTGRES_USER: str = "storefront"
    POSTGRES_PASSWORD: str = "storefront"
    # Overrides the POSTGRES_* parts when set
    DATABASE_URL: Optional[str] = None

    SERVICE_NAME: str = "storefront-service"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    RUN_MIGRATIONS: bool = False

    AUTH_COOKIE_SECRET: str = "dev_change_me"
    SESSION_COOKIE_NAME: str = "bs_session"
    SESSION_TTL_DAYS: int = 14
    JWT_ALG: str = "HS256"

    STORE_CURRENCY: str = "JMD"
    ORDER_HISTORY_LIMIT: int = 50
    PASSWORD_MIN_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"

    @property
    def session_cookie_name(self) -> str:
        return self.SESSION_COOKIE_NAME.strip() or "bs_session"

@lru_cache
def get_settings() -> Settings:
    return Settings()
