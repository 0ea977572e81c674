"""Payroll Pydantic v2 schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PayslipCreateRequest(BaseModel):
    emp_id: str = Field(..., min_length=1)
    month: str = Field(..., min_length=1, max_length=20)
    year: int = Field(..., ge=2000, le=2100)
    net_pay: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    file_url: Optional[str] = Field(None, max_length=500)


class PayslipOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payslip_id: str
    emp_id: str
    month: str
    year: int
    net_pay: Decimal
    gen_date: date
    file_url: Optional[str] = None
