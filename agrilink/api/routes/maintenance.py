"""Maintenance Routes — public notice of upcoming downtime."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.api import serializers
from agrilink.infrastructure.database import get_db
from agrilink.services.maintenance_service import MaintenanceService

router = APIRouter(prefix="/api/v1/maintenance", tags=["maintenance"])


@router.get("/schedule")
async def schedule(db: AsyncSession = Depends(get_db)):
    upcoming = await MaintenanceService(db).upcoming()
    return {
        "maintenance": serializers.maintenance_schedule(upcoming) if upcoming else None,
        "should_show": upcoming is not None,
    }
