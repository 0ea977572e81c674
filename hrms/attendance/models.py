"""Attendance ORM models: AttendanceRecord, Holiday."""

from __future__ import annotations

from datetime import date, time
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class AttendanceRecord(Base, SheetRowMixin):
    """A single check-in or check-out punch."""

    __tablename__ = "attendance"
    __table_args__ = (
        sa.Index("ix_attendance_emp_date", "emp_id", "punch_date"),
    )

    HEADERS = (
        "punch_date",
        "emp_id",
        "name",
        "punch_type",
        "punch_time",
        "lat",
        "lng",
        "map_link",
        "device",
    )

    punch_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    emp_id: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(sa.String(200))
    punch_type: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    punch_time: Mapped[time] = mapped_column(sa.Time, nullable=False)
    lat: Mapped[Optional[float]] = mapped_column(sa.Float)
    lng: Mapped[Optional[float]] = mapped_column(sa.Float)
    map_link: Mapped[Optional[str]] = mapped_column(sa.String(255))
    device: Mapped[Optional[str]] = mapped_column(sa.String(255))


class Holiday(Base, SheetRowMixin):
    __tablename__ = "holidays"

    HEADERS = ("holiday_date", "title", "holiday_type")

    holiday_date: Mapped[date] = mapped_column(sa.Date, unique=True, nullable=False)
    title: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    holiday_type: Mapped[str] = mapped_column(sa.String(50), nullable=False, default="Public")
