"""Leave ORM models: LeaveRequest, JobRun."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class LeaveRequest(Base, SheetRowMixin):
    __tablename__ = "leave_requests"
    __table_args__ = (
        sa.Index("ix_leave_requests_emp_status", "emp_id", "status"),
    )

    HEADERS = (
        "request_id",
        "emp_id",
        "name",
        "leave_type",
        "start_date",
        "end_date",
        "reason",
        "status",
        "days",
        "session",
        "created_at",
        "decided_by",
        "decided_at",
        "decision_note",
    )

    request_id: Mapped[str] = mapped_column(sa.String(40), unique=True, nullable=False)
    emp_id: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(sa.String(200))
    leave_type: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    status: Mapped[str] = mapped_column(sa.String(20), nullable=False, default="Pending")
    # Fixed at submission, never recomputed
    days: Mapped[Decimal] = mapped_column(sa.Numeric(6, 2), nullable=False)
    session: Mapped[str] = mapped_column(sa.String(20), nullable=False, default="Full Day")
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    decided_by: Mapped[Optional[str]] = mapped_column(sa.String(255))
    decided_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    decision_note: Mapped[Optional[str]] = mapped_column(sa.Text)

    def __repr__(self) -> str:
        return f"<LeaveRequest {self.request_id} {self.status}>"


class JobRun(Base, SheetRowMixin):
    """One row per scheduled job per reference-zone day."""

    __tablename__ = "job_runs"
    __table_args__ = (
        sa.UniqueConstraint("job", "run_date", name="uq_job_runs_job_date"),
    )

    HEADERS = ("job", "run_date", "finished_at", "summary")

    job: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    run_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    finished_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    summary: Mapped[Optional[str]] = mapped_column(sa.Text)
