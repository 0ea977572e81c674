"""Row bookkeeping shared by every table in the tabular store."""

from __future__ import annotations

from typing import ClassVar

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column


class SheetRowMixin:
    """
    Adds the row id and row version every table needs::

        class Holiday(Base, SheetRowMixin):
            HEADERS = ("holiday_date", "title", "holiday_type")

    ``HEADERS`` is the column order used when a row is appended as a plain
    sequence of values. ``version`` is bumped on every cell update and is the
    optimistic-concurrency token carried by ``RowRef``.
    """

    HEADERS: ClassVar[tuple[str, ...]] = ()

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    version: Mapped[int] = mapped_column(
        sa.Integer, nullable=False, default=1, server_default=sa.text("1"),
    )
