"""Service test fixtures — async DB, FastAPI test client and marketplace factories.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB sessions
    - db_manager patched so the readiness check hits the test engine
    - Factories write straight to the DB; tests drive behaviour through the API

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Users are created email-verified unless a test asks otherwise, so the
      email gate is only exercised where it is the subject of the test
"""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import agrilink.infrastructure.database as db_module
from agrilink.db.base import Base
from agrilink.infrastructure.database import DatabaseSessionManager, get_db
from agrilink.infrastructure.security import hash_password
from agrilink.main import app
from agrilink.models.category import Category
from agrilink.models.product import Product
from agrilink.models.user import User, UserProfile
from agrilink.models.user_verification import UserRating, UserVerification
from agrilink.services.auth_service import issue_token

PASSWORD = "harvest2026"


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = DatabaseSessionManager(test_engine)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Factories ───────────────────────────────────────────────────

@pytest.fixture
def auth():
    """Bearer header factory: auth(user) -> headers."""
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {issue_token(user)}"}
    return _headers


@pytest.fixture
async def categories(test_db):
    rows = [Category(name=name) for name in ("Vegetables", "Rice & Grains", "Fruits")]
    test_db.add_all(rows)
    await test_db.commit()
    return {c.name: c for c in rows}


@pytest.fixture
def make_user(test_db):
    async def _make(
        user_type: str = "buyer",
        name: str | None = None,
        email: str | None = None,
        account_type: str = "individual",
        email_verified: bool = True,
    ) -> User:
        user = User(
            id=uuid.uuid4(),
            email=email or f"{user_type}-{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(PASSWORD),
            name=name or user_type.title(),
            user_type=user_type,
            account_type=account_type,
            email_verified=email_verified,
        )
        user.profile = UserProfile()
        user.verification = UserVerification()
        user.rating = UserRating()
        user.business_details = None
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user
    return _make


@pytest.fixture
def make_product(test_db, categories):
    async def _make(seller: User, **fields) -> Product:
        values = {
            "name": "Jasmine Rice",
            "price": 50000.0,
            "quantity": 50,
            "quantity_unit": "kg",
            "packaging": "bag",
            "available_quantity": 100,
        }
        values.update(fields)
        category = categories[values.pop("category", "Rice & Grains")]
        product = Product(
            id=uuid.uuid4(), seller_id=seller.id, category_id=category.id, **values,
        )
        product.images = []
        test_db.add(product)
        await test_db.commit()
        await test_db.refresh(product)
        return product
    return _make


@pytest.fixture
async def farmer(make_user):
    return await make_user("farmer", name="Aung Farmer")


@pytest.fixture
async def buyer(make_user):
    return await make_user("buyer", name="Mya Buyer")


@pytest.fixture
async def admin(make_user):
    return await make_user("admin", name="Site Admin")


@pytest.fixture
async def product(make_product, farmer):
    return await make_product(farmer)
