"""Catalog Service — categories, locations, and the find-or-create location lookup.

Invariants:
    - Location lookup is case-insensitive: city+region first, then city alone
    - Unknown locations are created, never rejected
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.models.category import Category
from agrilink.models.location import Location

logger = logging.getLogger(__name__)


class CatalogService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def list_locations(self) -> list[Location]:
        result = await self.db.execute(
            select(Location).order_by(Location.region, Location.city),
        )
        return list(result.scalars().all())

    async def get_category_by_name(self, name: str) -> Category | None:
        result = await self.db.execute(
            select(Category).where(Category.name == name),
        )
        return result.scalar_one_or_none()

    async def find_or_create_location(
        self, city: str, region: str | None,
    ) -> Location:
        """Resolve a free-text city/region pair to a catalog row (flush only)."""
        city = city.strip()
        region = region.strip() if region else None
        city_match = func.lower(Location.city) == city.lower()

        if region:
            result = await self.db.execute(
                select(Location).where(
                    city_match, func.lower(Location.region) == region.lower(),
                ).limit(1),
            )
            location = result.scalar_one_or_none()
            if location:
                return location

        result = await self.db.execute(select(Location).where(city_match).limit(1))
        location = result.scalar_one_or_none()
        if location:
            return location

        location = Location(city=city, region=region)
        self.db.add(location)
        await self.db.flush()
        logger.info(f"Created location {city}, {region}")
        return location


def group_by_region(locations: list[Location]) -> dict[str, list[str]]:
    """{region: [city, ...]} with "Other" for locations without a region."""
    grouped: dict[str, list[str]] = {}
    for loc in locations:
        grouped.setdefault(loc.region or "Other", []).append(loc.city)
    return grouped
