"""Maintenance Schemas — admin request bodies for downtime windows."""

from datetime import datetime

from pydantic import BaseModel, Field


class MaintenanceCreate(BaseModel):
    start_time: datetime
    end_time: datetime
    message: str | None = Field(None, max_length=1000)


class MaintenanceActiveUpdate(BaseModel):
    is_active: bool
