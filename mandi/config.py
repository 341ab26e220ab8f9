from datetime import date, datetime
from typing import Optional

import pytz

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: str = "5432"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_NAME: str = "mandi_db"

    # Full URL wins over the parts above (e.g. "sqlite://" for tests)
    DATABASE_URL: Optional[str] = None

    # Business defaults
    TIMEZONE: str = "Asia/Kolkata"
    DEFAULT_SURCHARGE_PERCENT: float = 2.0
    DEFAULT_REORDER_LEVEL: float = 10
    STRICT_PRODUCT_REFERENCES: bool = False

    # Logging
    LOG_FILE: str = "app.log"
    LOG_LEVEL: str = "DEBUG"

    # Server
    SERVER_IP: str = "127.0.0.1"
    SERVER_PORT: int = 8000

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )


settings = Settings()


def local_now() -> datetime:
    return datetime.now(pytz.timezone(settings.TIMEZONE))


def local_today() -> date:
    return local_now().date()
