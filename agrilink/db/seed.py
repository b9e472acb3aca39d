"""Catalog Seed — categories, Myanmar locations and the initial admin account.

Invariants:
    - Idempotent: existing categories, locations and the admin are left untouched
    - Admin password comes from ADMIN_PASSWORD; when unset a random one is
      generated and logged once

Run with: python -m agrilink.db.seed
"""

import asyncio
import logging
import secrets

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.config import get_settings
from agrilink.core.domain_types import AccountType, UserType, VerificationStatus
from agrilink.db.session import create_session_factory
from agrilink.infrastructure.observability import setup_logging
from agrilink.infrastructure.security import hash_password
from agrilink.models import Category, Location, User, UserProfile, UserRating, UserVerification

logger = logging.getLogger(__name__)

CATEGORIES = (
    "Vegetables", "Fruits", "Rice & Grains", "Cooking Oil", "Livestock",
    "Seeds", "Fertilizers", "Equipment", "Other",
)

LOCATIONS: dict[str, tuple[str, ...]] = {
    "Yangon Region": ("Yangon", "Thanlyin", "Mingalardon", "Insein", "Hmawbi", "Hlegu"),
    "Mandalay Region": ("Mandalay", "Meiktila", "Pyinoolwin", "Kyaukse", "Myingyan"),
    "Naypyidaw Union Territory": ("Naypyidaw", "Pyinmana", "Lewe", "Tatkon"),
    "Ayeyarwady Region": ("Pathein", "Myaungmya", "Bogalay", "Pyapon", "Hinthada", "Maubin"),
    "Bago Region": ("Bago", "Pyay", "Taungoo", "Nyaunglebin"),
    "Magway Region": ("Magway", "Pakokku", "Minbu", "Chauk"),
    "Sagaing Region": ("Sagaing", "Monywa", "Shwebo", "Kale"),
    "Mon State": ("Mawlamyine", "Thaton", "Mudon", "Kyaikto"),
    "Shan State": ("Taunggyi", "Lashio", "Kengtung", "Kalaw"),
}


async def seed_catalog(db: AsyncSession) -> tuple[int, int]:
    """Insert missing categories and locations; returns (categories, locations) added."""
    existing = set((await db.execute(select(Category.name))).scalars().all())
    new_categories = [Category(name=name) for name in CATEGORIES if name not in existing]
    db.add_all(new_categories)

    known = set((await db.execute(select(Location.city, Location.region))).all())
    new_locations = [
        Location(city=city, region=region)
        for region, cities in LOCATIONS.items()
        for city in cities
        if (city, region) not in known
    ]
    db.add_all(new_locations)
    await db.commit()
    return len(new_categories), len(new_locations)


async def ensure_admin(db: AsyncSession, email: str, password: str) -> bool:
    """Create the admin account if absent; returns True when created."""
    result = await db.execute(select(User).where(User.email == email.lower()))
    if result.scalar_one_or_none():
        return False
    admin = User(
        email=email.lower(),
        password_hash=hash_password(password),
        name="AgriLink Admin",
        user_type=UserType.ADMIN.value,
        account_type=AccountType.INDIVIDUAL.value,
        email_verified=True,
    )
    admin.profile = UserProfile()
    admin.verification = UserVerification(
        verified=True, verification_status=VerificationStatus.VERIFIED.value,
    )
    admin.rating = UserRating()
    db.add(admin)
    await db.commit()
    return True


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    factory = create_session_factory(settings.database_url)
    async with factory() as db:
        categories, locations = await seed_catalog(db)
        logger.info(f"Seeded {categories} categories and {locations} locations")

        password = settings.admin_password or secrets.token_urlsafe(12)
        if await ensure_admin(db, settings.admin_email, password):
            logger.info(f"Created admin account {settings.admin_email}")
            if not settings.admin_password:
                logger.warning(f"Generated admin password: {password} (change it after first login)")


if __name__ == "__main__":
    asyncio.run(main())
