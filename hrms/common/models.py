"""Common ORM models: SystemLog (audit trail), AppSetting."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class SystemLog(Base, SheetRowMixin):
    """Append-only log of every significant action."""

    __tablename__ = "system_logs"
    __table_args__ = (
        sa.Index("ix_system_logs_logged_at", "logged_at"),
        sa.Index("ix_system_logs_action", "action"),
    )

    HEADERS = ("logged_at", "user_email", "action", "details", "meta")

    logged_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    user_email: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    action: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    details: Mapped[Optional[str]] = mapped_column(sa.Text)
    meta: Mapped[Optional[str]] = mapped_column(sa.String(255))

    def __repr__(self) -> str:
        return f"<SystemLog {self.action} by {self.user_email}>"


class AppSetting(Base, SheetRowMixin):
    __tablename__ = "app_settings"

    HEADERS = ("setting", "value")

    setting: Mapped[str] = mapped_column(sa.String(100), unique=True, nullable=False)
    value: Mapped[Optional[str]] = mapped_column(sa.Text)
