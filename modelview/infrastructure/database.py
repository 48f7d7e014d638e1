"""
Database connection pool.

DatabasePool is the explicit handle around one SQLAlchemy async engine and
its session factory. The application receives it by reference; a
process-wide default is built exactly once under a lock by get_database().
"""

import logging
import threading
from typing import Optional

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from modelview.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Name of the connect-timeout argument understood by each async driver.
_CONNECT_TIMEOUT_ARGS = {
    "asyncpg": "timeout",
    "psycopg": "connect_timeout",
    "aiosqlite": "timeout",
}


def engine_options(settings: Settings) -> dict:
    """Translate pool settings into create_async_engine keyword arguments.

    ``pool_size`` keeps the minimum number of connections and
    ``max_overflow`` allows growth up to the maximum. SQLAlchemy has no
    separate idle timeout, so connections are recycled after the shorter of
    the idle timeout and the maximum lifetime.
    """
    min_size = max(settings.db_pool_min_size, 1)
    max_size = max(settings.db_pool_max_size, min_size)
    options = {
        "echo": settings.db_echo,
        "poolclass": AsyncAdaptedQueuePool,
        "pool_pre_ping": True,
        "pool_size": min_size,
        "max_overflow": max_size - min_size,
        "pool_timeout": settings.db_acquire_timeout,
        "pool_recycle": int(min(settings.db_idle_timeout, settings.db_max_lifetime)),
    }
    driver = make_url(settings.database_url).get_driver_name()
    timeout_arg = _CONNECT_TIMEOUT_ARGS.get(driver)
    if timeout_arg is not None:
        options["connect_args"] = {timeout_arg: settings.db_connect_timeout}
    return options


class DatabasePool:
    """Owns the async engine and hands out sessions.

    The engine is created lazily on first use so that constructing the
    handle never touches the network.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._lock = threading.Lock()

    def _ensure_engine(self) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
        with self._lock:
            if self._engine is None:
                url = make_url(self._settings.database_url)
                logger.info(
                    "initial %s connection at %s:%s database %s",
                    url.drivername,
                    url.host,
                    url.port,
                    url.database,
                )
                self._engine = create_async_engine(
                    self._settings.database_url, **engine_options(self._settings)
                )
                self._session_factory = async_sessionmaker(
                    self._engine, class_=AsyncSession, expire_on_commit=False
                )
            return self._engine, self._session_factory

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def engine(self) -> AsyncEngine:
        return self._ensure_engine()[0]

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._ensure_engine()[1]

    async def create_all(self, metadata: MetaData) -> None:
        """Create every table of ``metadata`` that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
        logger.info("Created missing tables: %s", ", ".join(sorted(metadata.tables)))

    async def dispose(self) -> None:
        """Close every pooled connection. The handle may be reused afterwards."""
        with self._lock:
            engine, self._engine, self._session_factory = self._engine, None, None
        if engine is not None:
            await engine.dispose()
            logger.info("Database pool disposed.")


_default_pool: Optional[DatabasePool] = None
_default_lock = threading.Lock()


def get_database(settings: Optional[Settings] = None) -> DatabasePool:
    """Return the process-wide DatabasePool, creating it exactly once.

    Only the settings of the first call are used. Later calls passing
    different settings get the existing pool and a warning.
    """
    global _default_pool
    with _default_lock:
        if _default_pool is None:
            _default_pool = DatabasePool(settings or default_settings)
        elif settings is not None and settings != _default_pool.settings:
            logger.warning(
                "Database pool already initialised; ignoring settings for %s",
                make_url(settings.database_url).render_as_string(hide_password=True),
            )
        return _default_pool
