import os
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

from app.core.errors import ConfigurationError

load_dotenv()

DB_ENV_VARS = ("DB_USER", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_NAME")


def build_database_url(user: str, password: str, host: str, port: str, name: str) -> str:
    """PostgreSQL URL with transport encryption disabled."""
    return (
        f"postgresql+psycopg2://{quote_plus(user)}:{quote_plus(password)}"
        f"@{host}:{port}/{name}?sslmode=disable"
    )


@dataclass
class Settings:
    db_user: Optional[str] = os.getenv("DB_USER")
    db_password: Optional[str] = os.getenv("DB_PASSWORD")
    db_host: Optional[str] = os.getenv("DB_HOST")
    db_port: Optional[str] = os.getenv("DB_PORT")
    db_name: Optional[str] = os.getenv("DB_NAME")
    database_url: str = os.getenv("DATABASE_URL", "")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8080"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    request_timeout_ms: int = int(os.getenv("REQUEST_TIMEOUT_MS", "5000"))

    def __post_init__(self):
        if self.database_url:
            return
        parts = (self.db_user, self.db_password, self.db_host, self.db_port, self.db_name)
        missing = [name for name, value in zip(DB_ENV_VARS, parts) if value is None]
        if missing:
            raise ConfigurationError(
                f"Missing database configuration: {', '.join(missing)} (or set DATABASE_URL)"
            )
        self.database_url = build_database_url(*parts)


settings = Settings()
