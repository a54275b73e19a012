import logging
import ssl
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any

from sqlalchemy.ext.asyncio import create_async_engine, AsyncConnection, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy.schema import CreateTable

from .config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def build_connect_args(settings: Settings) -> Dict[str, Any]:
    """asyncpg connect arguments: TLS policy, timeout and server settings.

    libpq-style options from the connection string are translated here:
    ``connect_timeout`` becomes asyncpg's ``timeout``, ``application_name``
    and ``options`` go to the startup packet via ``server_settings``, and
    ``sslmode=disable`` / ``verify-*`` adjust the TLS policy. The remaining
    libpq-only keys have no asyncpg equivalent and are dropped.

    Other backends (sqlite in tests) take no extra arguments.
    """
    if settings.ASYNC_DATABASE_URL.get_backend_name() != "postgresql":
        return {}

    libpq = settings.LIBPQ_OPTIONS
    server_settings = {
        "application_name": libpq.get("application_name", settings.APP_NAME)
    }
    if libpq.get("options"):
        server_settings["options"] = libpq["options"]
    connect_args: Dict[str, Any] = {"server_settings": server_settings}
    if libpq.get("connect_timeout"):
        connect_args["timeout"] = float(libpq["connect_timeout"])

    sslmode = libpq.get("sslmode")
    if not settings.DB_SSL or sslmode == "disable":
        connect_args["ssl"] = False
    elif settings.DB_SSL_VERIFY or sslmode in ("verify-ca", "verify-full"):
        connect_args["ssl"] = ssl.create_default_context()
    else:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = context
    return connect_args


def create_engine(settings: Settings) -> AsyncEngine:
    # NullPool: every checkout opens a new connection and every release closes it
    return create_async_engine(
        settings.ASYNC_DATABASE_URL,
        echo=settings.DB_ECHO,
        poolclass=NullPool,
        connect_args=build_connect_args(settings),
    )


@asynccontextmanager
async def get_connection(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    """Open a fresh connection, run one autocommitted unit, close it."""
    async with engine.begin() as conn:
        yield conn


async def init_db(engine: AsyncEngine):
    # Imported here so the model registers on Base before the DDL is built
    from taskapi.models.task import Task

    async with get_connection(engine) as conn:
        await conn.execute(CreateTable(Task.__table__, if_not_exists=True))
    logger.info("Schema ready: table %s", Task.__tablename__)
