from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    AsyncAttrs,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import database_logger, settings


# Base class for declarative_base
class Base(AsyncAttrs, DeclarativeBase):
    pass


def create_db_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool sizing only applies to server databases; SQLite uses its own
    connection pooling and rejects the QueuePool arguments.

    Args:
        database_url (str | None): SQLAlchemy URL. Defaults to settings.DATABASE_URL.

    Returns:
        AsyncEngine: The configured engine.
    """
    url = make_url(database_url or settings.DATABASE_URL)

    if url.get_backend_name() == "sqlite":
        return create_async_engine(url, echo=settings.DEBUG)

    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,  # Validate connections before use
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        autobegin=True,
    )


async def init_db(engine: AsyncEngine) -> None:
    """
    Initializes the database by creating all the tables defined in the metadata.

    Args:
        engine (AsyncEngine): Engine bound to the target database.

    Returns:
        None
    """
    # Register the models on Base.metadata before creating tables
    import app.apps.website.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    database_logger.info("Database tables initialized successfully")


async def dispose_db(engine: AsyncEngine) -> None:
    """
    Dispose the engine and close every pooled connection.

    Args:
        engine (AsyncEngine): Engine to dispose.

    Returns:
        None
    """
    await engine.dispose()
    database_logger.info("Database pool closed")


def pool_status(engine: AsyncEngine) -> dict[str, int]:
    """
    Report connection pool gauges.

    Only pools that track checkouts (QueuePool and friends) expose the
    gauges; other pools report an empty mapping.

    Args:
        engine (AsyncEngine): Engine whose pool is inspected.

    Returns:
        dict[str, int]: Pool size and connection counts.
    """
    pool = engine.pool
    gauges: dict[str, int] = {}
    for name, attribute in (
        ("pool_size", "size"),
        ("checked_in", "checkedin"),
        ("checked_out", "checkedout"),
        ("overflow", "overflow"),
    ):
        getter = getattr(pool, attribute, None)
        if callable(getter):
            gauges[name] = getter()
    return gauges
