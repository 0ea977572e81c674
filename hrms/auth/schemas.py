"""Auth Pydantic schemas: the resolved caller."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from hrms.common.constants import APPROVER_ROLES, UserRole


class CallerContext(BaseModel):
    """The employee behind the current request, as seen by the services."""

    model_config = ConfigDict(from_attributes=True)

    emp_id: str
    name: str
    email: str
    role: str
    department: Optional[str] = None
    designation: Optional[str] = None
    status: Optional[str] = None
    manager_id: Optional[str] = None
    doj: Optional[date] = None
    dob: Optional[date] = None
    mobile: Optional[str] = None
    bal_cl: Decimal = Decimal("0")
    bal_sl: Decimal = Decimal("0")
    bal_mat: Decimal = Decimal("0")
    bal_pat: Decimal = Decimal("0")

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> CallerContext:
        # Local import: the ledger module imports this one
        from hrms.leave.ledger import round_balance

        return cls(
            emp_id=record["emp_id"],
            name=record["name"],
            email=record["email"],
            role=str(record.get("role") or "").strip().upper(),
            department=record.get("department"),
            designation=record.get("designation"),
            status=record.get("status"),
            manager_id=record.get("manager_id"),
            doj=record.get("doj"),
            dob=record.get("dob"),
            mobile=record.get("mobile"),
            bal_cl=round_balance(record.get("bal_cl")),
            bal_sl=round_balance(record.get("bal_sl")),
            bal_mat=round_balance(record.get("bal_mat")),
            bal_pat=round_balance(record.get("bal_pat")),
        )

    def has_role(self, roles: Iterable[UserRole]) -> bool:
        return self.role in {r.value for r in roles}

    @property
    def is_approver(self) -> bool:
        """ADMIN and HR may act on anyone's records."""
        return self.has_role(APPROVER_ROLES)
