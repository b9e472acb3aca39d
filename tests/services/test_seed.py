"""Catalog Seed — idempotent categories, locations and admin bootstrap."""

from sqlalchemy import func, select

from agrilink.db.seed import CATEGORIES, LOCATIONS, ensure_admin, seed_catalog
from agrilink.infrastructure.security import verify_password
from agrilink.models import Category, User


async def test_seed_catalog_is_idempotent(test_db):
    categories, locations = await seed_catalog(test_db)
    assert categories == len(CATEGORIES)
    assert locations == sum(len(cities) for cities in LOCATIONS.values())

    assert await seed_catalog(test_db) == (0, 0)
    assert await test_db.scalar(select(func.count(Category.id))) == len(CATEGORIES)


async def test_ensure_admin_creates_once(test_db):
    assert await ensure_admin(test_db, "Admin@AgriLink.test", "s3cret-pass") is True
    assert await ensure_admin(test_db, "admin@agrilink.test", "other-pass") is False

    admin = await test_db.scalar(select(User).where(User.email == "admin@agrilink.test"))
    assert admin.user_type == "admin"
    assert admin.verification.verified is True
    assert verify_password(admin.password_hash, "s3cret-pass")
