from functools import lru_cache
from typing import Dict
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url

# libpq connection options that asyncpg.connect() rejects as keywords.
# They are removed from the URL and handed to build_connect_args instead.
LIBPQ_ONLY_OPTIONS = (
    "sslmode",
    "channel_binding",
    "connect_timeout",
    "options",
    "application_name",
    "fallback_application_name",
    "sslrootcert",
    "sslcert",
    "sslkey",
    "sslpassword",
    "gssencmode",
    "keepalives",
    "keepalives_idle",
    "keepalives_interval",
    "keepalives_count",
)


class Settings(BaseSettings):
    DATABASE_URL: str
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    APP_NAME: str = "taskapi"
    DB_SSL: bool = True
    # Hosted Postgres (Neon) presents certificates we cannot verify
    DB_SSL_VERIFY: bool = False
    DB_ECHO: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"
        frozen = True

    @property
    def ASYNC_DATABASE_URL(self) -> URL:
        url = make_url(self.DATABASE_URL)
        if url.drivername in ("postgres", "postgresql"):
            url = url.set(drivername="postgresql+asyncpg")
        return url.difference_update_query(LIBPQ_ONLY_OPTIONS)

    @property
    def LIBPQ_OPTIONS(self) -> Dict[str, str]:
        """libpq-only query options from DATABASE_URL, last value wins."""
        options = {}
        for key, value in make_url(self.DATABASE_URL).query.items():
            if key in LIBPQ_ONLY_OPTIONS:
                options[key] = value[-1] if isinstance(value, tuple) else value
        return options


@lru_cache
def get_settings() -> Settings:
    return Settings()
