"""Async Session Factory — sessions for code that runs outside FastAPI.

Invariants:
    - Meant for the seed command, migrations and scripts
    - expire_on_commit=False, same as the request-scoped manager
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker


def create_session_factory(
    database_url: str,
) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory for the given database URL."""
    engine = create_async_engine(database_url, echo=False)
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )
