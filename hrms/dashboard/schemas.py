"""Dashboard Pydantic v2 schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AnnouncementCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)


class AnnouncementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    posted_at: datetime
    title: str
    message: str
    posted_by: Optional[str] = None


class LogEntryOut(BaseModel):
    logged_at: datetime
    user_email: str
    action: str
    details: Optional[str] = None
    meta: Optional[str] = None


class DashboardStatsOut(BaseModel):
    employee_count: int
    pending_leaves: int
    logs: list[LogEntryOut]
    announcements: list[AnnouncementOut]
