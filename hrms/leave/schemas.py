"""Leave Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Request  → request bodies (write)
  - *Out      → response bodies (read)
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from hrms.common.constants import BalanceKey, LeaveSession


# ═════════════════════════════════════════════════════════════════════
# Leave requests
# ═════════════════════════════════════════════════════════════════════


class LeaveApplyRequest(BaseModel):
    leave_type: str = Field(..., min_length=1, max_length=100)
    start_date: date
    end_date: date
    session: LeaveSession = LeaveSession.full_day
    reason: Optional[str] = Field(None, max_length=2000)


class LeaveDecisionRequest(BaseModel):
    note: Optional[str] = Field(None, max_length=2000)


class LeaveRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    request_id: str
    emp_id: str
    name: Optional[str] = None
    leave_type: str
    start_date: date
    end_date: date
    reason: Optional[str] = None
    status: str
    days: Decimal
    session: str
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    decision_note: Optional[str] = None


class LeaveDataOut(BaseModel):
    my_leaves: list[LeaveRequestOut]
    team_leaves: list[LeaveRequestOut]


# ═════════════════════════════════════════════════════════════════════
# Day count preview
# ═════════════════════════════════════════════════════════════════════


class DayCountOut(BaseModel):
    days: int
    excluded_count: int
    excluded_dates: list[date]


# ═════════════════════════════════════════════════════════════════════
# Balances
# ═════════════════════════════════════════════════════════════════════


class BalanceOut(BaseModel):
    emp_id: str
    casual: Decimal
    sick: Decimal
    maternity: Decimal
    paternity: Decimal
    last_balance_update: Optional[date] = None


class BalanceAdjustRequest(BaseModel):
    emp_id: str = Field(..., min_length=1)
    key: BalanceKey
    amount: Decimal = Field(..., max_digits=8, decimal_places=2)
    reason: str = Field(..., min_length=1, max_length=500)


class JobRunOut(BaseModel):
    job: str
    run_date: date
    skipped: bool
    msg: str
