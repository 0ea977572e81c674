"""Payroll ORM model: Payslip."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class Payslip(Base, SheetRowMixin):
    __tablename__ = "payslips"
    __table_args__ = (
        sa.Index("ix_payslips_emp_id", "emp_id"),
    )

    HEADERS = ("payslip_id", "emp_id", "month", "year", "net_pay", "gen_date", "file_url")

    payslip_id: Mapped[str] = mapped_column(sa.String(40), unique=True, nullable=False)
    emp_id: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    month: Mapped[str] = mapped_column(sa.String(20), nullable=False)
    year: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(sa.Numeric(12, 2), nullable=False)
    gen_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    file_url: Mapped[Optional[str]] = mapped_column(sa.String(500))
