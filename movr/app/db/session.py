"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support (asyncpg against PostgreSQL or
CockroachDB).
"""

import ssl
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from movr.app.core.config import settings


def build_connect_args(ssl_cert: Optional[str]) -> Dict[str, Any]:
    """
    Build driver connect arguments.

    When a CA certificate path is configured, connections are made over TLS
    and the server certificate is verified against it.
    """
    if not ssl_cert:
        return {}
    context = ssl.create_default_context(cafile=ssl_cert)
    return {"ssl": context}


def build_engine_kwargs(database_url: str) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"echo": settings.db_echo}
    # SQLite uses a single-connection pool without sizing options
    if not database_url.startswith("sqlite"):
        kwargs["pool_size"] = settings.db_pool_size
        kwargs["max_overflow"] = settings.db_max_overflow
        kwargs["connect_args"] = build_connect_args(settings.db_ssl_cert)
    return kwargs


# Create async engine
engine = create_async_engine(settings.database_url, **build_engine_kwargs(settings.database_url))

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
