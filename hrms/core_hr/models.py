"""Core HR ORM model: Employee.

One row per person. Balances live on the employee row itself, one column
per balance key, and are only ever changed through ``BalanceLedger``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


class Employee(Base, SheetRowMixin):
    """Employee master record."""

    __tablename__ = "employees"
    __table_args__ = (
        sa.Index("ix_employees_email", "email"),
        sa.Index("ix_employees_manager_id", "manager_id"),
    )

    HEADERS = (
        "emp_id",
        "name",
        "email",
        "role",
        "department",
        "designation",
        "doj",
        "dob",
        "mobile",
        "status",
        "bal_cl",
        "bal_sl",
        "bal_mat",
        "bal_pat",
        "last_balance_update",
        "manager_id",
    )

    emp_id: Mapped[str] = mapped_column(sa.String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), unique=True, nullable=False)
    role: Mapped[str] = mapped_column(sa.String(20), nullable=False, default="EMPLOYEE")
    department: Mapped[Optional[str]] = mapped_column(sa.String(100))
    designation: Mapped[Optional[str]] = mapped_column(sa.String(100))
    doj: Mapped[Optional[date]] = mapped_column(sa.Date)
    dob: Mapped[Optional[date]] = mapped_column(sa.Date)
    mobile: Mapped[Optional[str]] = mapped_column(sa.String(15))
    status: Mapped[str] = mapped_column(sa.String(20), nullable=False, default="Active")

    # Balances
    bal_cl: Mapped[Decimal] = mapped_column(sa.Numeric(8, 2), nullable=False, default=0)
    bal_sl: Mapped[Decimal] = mapped_column(sa.Numeric(8, 2), nullable=False, default=0)
    bal_mat: Mapped[Decimal] = mapped_column(sa.Numeric(8, 2), nullable=False, default=0)
    bal_pat: Mapped[Decimal] = mapped_column(sa.Numeric(8, 2), nullable=False, default=0)
    last_balance_update: Mapped[Optional[date]] = mapped_column(sa.Date)

    # Reporting line, by emp_id
    manager_id: Mapped[Optional[str]] = mapped_column(sa.String(50))

    def __repr__(self) -> str:
        return f"<Employee {self.emp_id} {self.email}>"
