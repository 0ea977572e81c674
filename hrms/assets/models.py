"""Asset ORM model."""

from __future__ import annotations

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class Asset(Base, SheetRowMixin):
    __tablename__ = "assets"

    HEADERS = ("asset_id", "asset_type", "model", "serial_no", "assigned_to", "status")

    asset_id: Mapped[str] = mapped_column(sa.String(40), unique=True, nullable=False)
    asset_type: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    model: Mapped[Optional[str]] = mapped_column(sa.String(200))
    serial_no: Mapped[Optional[str]] = mapped_column(sa.String(100))
    assigned_to: Mapped[Optional[str]] = mapped_column(sa.String(50))
    status: Mapped[str] = mapped_column(sa.String(20), nullable=False, default="Available")
