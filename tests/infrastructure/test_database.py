"""Database Access — error translation, pool options and session rollback."""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, InvalidRequestError, OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

from agrilink.core.errors import BusinessRuleError, DatabaseError
from agrilink.infrastructure.database import (
    DatabaseSessionManager, engine_options, translate_error,
)


@pytest.fixture
async def manager():
    mgr = DatabaseSessionManager(create_async_engine("sqlite+aiosqlite:///:memory:"))
    yield mgr
    await mgr.dispose()


def test_translate_error_picks_most_specific_kind():
    integrity = translate_error(IntegrityError("INSERT", {}, Exception("dup")))
    assert integrity.operation == "commit"
    assert integrity.http_status == 503
    assert translate_error(OperationalError("SELECT", {}, Exception("down"))).operation == "execute"
    assert translate_error(InvalidRequestError("bad")).operation == "unknown"


def test_pool_options_only_for_server_databases():
    assert engine_options("sqlite+aiosqlite:///:memory:", 5, 2) == {}
    options = engine_options("postgresql+asyncpg://u:p@db/agrilink", 5, 2)
    assert options["pool_size"] == 5
    assert options["max_overflow"] == 2
    assert options["pool_pre_ping"] is True


async def test_sqlalchemy_failure_becomes_database_error(manager):
    with pytest.raises(DatabaseError) as exc:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.operation == "execute"


async def test_domain_error_passes_through(manager):
    with pytest.raises(BusinessRuleError):
        async with manager.session():
            raise BusinessRuleError("nope", "TEST_RULE")


async def test_ping(manager):
    assert await manager.ping() is True
