"""Dashboard ORM model: Announcement."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class Announcement(Base, SheetRowMixin):
    __tablename__ = "announcements"

    HEADERS = ("posted_at", "title", "message", "posted_by")

    posted_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    message: Mapped[str] = mapped_column(sa.Text, nullable=False)
    posted_by: Mapped[Optional[str]] = mapped_column(sa.String(255))
