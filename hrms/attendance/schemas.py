"""Attendance & holiday Pydantic v2 schemas."""

from __future__ import annotations

from datetime import date, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrms.common.constants import PunchType


# ═════════════════════════════════════════════════════════════════════
# Punches
# ═════════════════════════════════════════════════════════════════════


class PunchRequest(BaseModel):
    punch_type: PunchType
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    device: str = Field("Web", max_length=255)


class AttendanceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    punch_date: date
    emp_id: str
    name: Optional[str] = None
    punch_type: str
    punch_time: time
    lat: Optional[float] = None
    lng: Optional[float] = None
    map_link: Optional[str] = None
    device: Optional[str] = None


class TodayOut(BaseModel):
    check_in: Optional[time] = None
    check_out: Optional[time] = None


class ServerTimeOut(BaseModel):
    date: str
    time: str


class PunchDetailOut(BaseModel):
    type: str
    punch_time: time
    lat: Optional[float] = None
    lng: Optional[float] = None


# ═════════════════════════════════════════════════════════════════════
# Daily summary (ADMIN/HR dashboard)
# ═════════════════════════════════════════════════════════════════════


class MapPoint(BaseModel):
    lat: float
    lng: float
    label: str


class HoursEntry(BaseModel):
    emp_id: str
    name: Optional[str] = None
    hours: float


class PunchLogEntry(BaseModel):
    emp_id: str
    name: Optional[str] = None
    type: str


class DailySummaryOut(BaseModel):
    day: date
    map_points: list[MapPoint]
    hours: list[HoursEntry]
    logs: list[PunchLogEntry]


# ═════════════════════════════════════════════════════════════════════
# Holidays
# ═════════════════════════════════════════════════════════════════════


class HolidayCreateRequest(BaseModel):
    holiday_date: date
    title: str = Field(..., min_length=1, max_length=150)
    holiday_type: str = Field("Public", max_length=50)


class HolidayOut(BaseModel):
    holiday_date: date
    title: str
    holiday_type: str
