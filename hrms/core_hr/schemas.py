"""Core HR Pydantic v2 schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hrms.common.constants import EmployeeStatus, UserRole


# ── Requests ────────────────────────────────────────────────────────

class EmployeeCreateRequest(BaseModel):
    emp_id: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    role: UserRole = UserRole.employee
    department: Optional[str] = Field(None, max_length=100)
    designation: Optional[str] = Field(None, max_length=100)
    doj: date
    dob: Optional[date] = None
    mobile: Optional[str] = None
    manager_id: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    mobile: Optional[str] = None
    dob: Optional[date] = None


class ManagerUpdateRequest(BaseModel):
    manager_id: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: EmployeeStatus


# ── Responses ───────────────────────────────────────────────────────

class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    emp_id: str
    name: str
    email: str
    role: str
    department: Optional[str] = None
    designation: Optional[str] = None
    doj: Optional[date] = None
    dob: Optional[date] = None
    mobile: Optional[str] = None
    status: str
    bal_cl: Decimal
    bal_sl: Decimal
    bal_mat: Decimal
    bal_pat: Decimal
    last_balance_update: Optional[date] = None
    manager_id: Optional[str] = None
