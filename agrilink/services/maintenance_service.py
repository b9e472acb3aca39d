"""Maintenance Service — admin scheduling of downtime and the public announcement.

Invariants:
    - Windows are validated by core.maintenance before they are stored
    - The public schedule returns at most one window: the earliest announceable one
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core.errors import ResourceNotFoundError
from agrilink.core.maintenance import (
    MIN_DURATION_MINUTES, should_announce, validate_window,
)
from agrilink.models.maintenance_schedule import MaintenanceSchedule
from agrilink.schemas.maintenance import MaintenanceCreate

logger = logging.getLogger(__name__)


class MaintenanceService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_schedules(self) -> list[MaintenanceSchedule]:
        result = await self.db.execute(
            select(MaintenanceSchedule).order_by(MaintenanceSchedule.start_time.desc()),
        )
        return list(result.scalars().all())

    async def create(self, body: MaintenanceCreate) -> MaintenanceSchedule:
        minutes = validate_window(
            body.start_time, body.end_time, datetime.now(timezone.utc),
        )
        schedule = MaintenanceSchedule(
            start_time=body.start_time,
            end_time=body.end_time,
            duration_minutes=minutes,
            message=body.message,
        )
        self.db.add(schedule)
        await self.db.commit()
        await self.db.refresh(schedule)
        logger.info(f"Maintenance scheduled for {minutes} minutes at {schedule.start_time}")
        return schedule

    async def set_active(self, schedule_id: uuid.UUID, is_active: bool) -> MaintenanceSchedule:
        schedule = await self._get(schedule_id)
        schedule.is_active = is_active
        await self.db.commit()
        await self.db.refresh(schedule)
        return schedule

    async def delete(self, schedule_id: uuid.UUID) -> None:
        schedule = await self._get(schedule_id)
        await self.db.delete(schedule)
        await self.db.commit()
        logger.info(f"Maintenance schedule {schedule_id} deleted")

    async def upcoming(self) -> MaintenanceSchedule | None:
        now = datetime.now(timezone.utc)
        result = await self.db.execute(
            select(MaintenanceSchedule)
            .where(
                MaintenanceSchedule.is_active.is_(True),
                MaintenanceSchedule.duration_minutes > MIN_DURATION_MINUTES,
                MaintenanceSchedule.start_time > now,
            )
            .order_by(MaintenanceSchedule.start_time.asc())
            .limit(1),
        )
        schedule = result.scalar_one_or_none()
        if schedule and should_announce(
            schedule.start_time, schedule.duration_minutes, schedule.is_active, now,
        ):
            return schedule
        return None

    async def _get(self, schedule_id: uuid.UUID) -> MaintenanceSchedule:
        schedule = await self.db.get(MaintenanceSchedule, schedule_id)
        if not schedule:
            raise ResourceNotFoundError("MaintenanceSchedule", str(schedule_id))
        return schedule
