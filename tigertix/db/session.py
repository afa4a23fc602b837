"""
Async engine and session factory.

SQLite needs two adjustments before the booking core can rely on it:
the driver's implicit BEGIN is switched off so SQLAlchemy emits BEGIN itself,
which lets a connection ask for BEGIN IMMEDIATE through an execution option;
and foreign keys are enforced per connection.

PostgreSQL row locks come from SELECT ... FOR UPDATE in the service layer;
the engine only bounds how long a statement may wait for one.
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from tigertix.core.config import get_settings

settings = get_settings()

SQLITE_BEGIN_OPTION = "sqlite_begin_mode"
_SQLITE_BEGIN_MODES = ("DEFERRED", "IMMEDIATE", "EXCLUSIVE")

# Execution options for a write-intent transaction: takes the write lock at BEGIN.
EXCLUSIVE_TRANSACTION = {SQLITE_BEGIN_OPTION: "IMMEDIATE"}


def is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def create_db_engine(url: Optional[str] = None, lock_timeout: Optional[float] = None) -> AsyncEngine:
    url = url or settings.DATABASE_URL
    timeout = settings.DB_LOCK_TIMEOUT if lock_timeout is None else lock_timeout

    if is_sqlite(url):
        engine = create_async_engine(url, echo=settings.DEBUG, connect_args={"timeout": timeout})
        _configure_sqlite(engine)
        return engine

    connect_args = {}
    if make_url(url).get_driver_name() == "asyncpg":
        connect_args["server_settings"] = {"lock_timeout": str(int(timeout * 1000))}

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def _configure_sqlite(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get(SQLITE_BEGIN_OPTION, "DEFERRED")
        if mode not in _SQLITE_BEGIN_MODES:
            raise ValueError(f"Unsupported SQLite begin mode: {mode!r}")
        conn.exec_driver_sql(f"BEGIN {mode}")


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine: AsyncEngine = create_db_engine()
AsyncSessionLocal = create_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, committed when the handler succeeds."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
