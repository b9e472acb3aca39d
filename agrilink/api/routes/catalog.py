"""Catalog Routes — categories and locations for listing and profile forms."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.infrastructure.database import get_db
from agrilink.services.catalog_service import CatalogService, group_by_region

router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.get("/categories")
async def list_categories(db: AsyncSession = Depends(get_db)):
    categories = await CatalogService(db).list_categories()
    return {
        "categories": [
            {"id": str(c.id), "name": c.name, "description": c.description}
            for c in categories
        ],
    }


@router.get("/locations")
async def list_locations(db: AsyncSession = Depends(get_db)):
    locations = await CatalogService(db).list_locations()
    return {
        "locations": [
            {"id": str(loc.id), "city": loc.city, "region": loc.region}
            for loc in locations
        ],
        "grouped": group_by_region(locations),
    }
