"""
Relational database connection and session management
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import config
from app.core.errors import DatabaseError
from app.core.logger import logger
from app.models.customer import Base


class Database:
    """Database connection manager"""

    engine: Optional[AsyncEngine] = None
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None


db = Database()


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    options = {"echo": echo, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options["pool_recycle"] = 3600
    return create_async_engine(database_url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def connect_to_database():
    """Create the engine, verify connectivity and optionally create tables"""
    logger.info("Connecting to database...")

    try:
        db.engine = create_engine(config.database_url, echo=config.database_echo)
        db.session_factory = create_session_factory(db.engine)

        async with db.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if config.database_create_tables:
                await conn.run_sync(Base.metadata.create_all)

        logger.info(
            "Successfully connected to database",
            metadata={
                "event": "database_connected",
                "dialect": db.engine.dialect.name,
                "create_tables": config.database_create_tables,
            },
        )
    except Exception as e:
        logger.error(
            f"Could not connect to database: {e}",
            metadata={"event": "database_connection_error", "error": str(e)},
        )
        raise DatabaseError(f"Could not connect to database: {e}")


async def close_database_connection():
    """Dispose of the engine and its pooled connections"""
    logger.info("Closing database connection...")
    if db.engine is not None:
        await db.engine.dispose()
        db.engine = None
        db.session_factory = None


async def ping_database() -> bool:
    if db.engine is None:
        return False
    async with db.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request"""
    if db.session_factory is None:
        await connect_to_database()
    async with db.session_factory() as session:
        yield session
