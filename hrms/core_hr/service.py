"""Employee service — onboarding, profile updates, reporting lines, listing."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.clock import local_today
from hrms.common.constants import APPROVER_ROLES, EmployeeStatus, Table
from hrms.common.results import ActionResult
from hrms.config import settings
from hrms.core_hr.hierarchy import ReportingForest
from hrms.core_hr.schemas import EmployeeCreateRequest, ProfileUpdateRequest
from hrms.leave.ledger import round_balance
from hrms.store.service import Record, RowRef, TabularStore

logger = logging.getLogger(__name__)

_MOBILE_RE = re.compile(r"^\d{10}$")
MINIMUM_AGE = 18


def age_on(dob: date, today: date) -> int:
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def validate_contact(
    mobile: Optional[str],
    dob: Optional[date],
    today: date,
    *,
    self_service: bool = False,
) -> Optional[str]:
    """Return the first problem with a mobile/DOB pair, or ``None``."""
    if not mobile or not dob:
        return "Mobile number and DOB are required."
    if not _MOBILE_RE.match(mobile):
        return "Invalid mobile number. Please enter a 10-digit number."
    if age_on(dob, today) < MINIMUM_AGE:
        if self_service:
            return "You must be at least 18 years old."
        return "Employee must be at least 18 years old."
    return None


def rounded(record: Record) -> Record:
    """A copy of an employee record with the four balances rounded."""
    out = dict(record)
    for column in ("bal_cl", "bal_sl", "bal_mat", "bal_pat"):
        out[column] = round_balance(record.get(column))
    return out


# ═════════════════════════════════════════════════════════════════════
# EmployeeService
# ═════════════════════════════════════════════════════════════════════


class EmployeeService:
    """Async employee operations."""

    @staticmethod
    async def create(
        store: TabularStore,
        caller: CallerContext,
        form: EmployeeCreateRequest,
        today: Optional[date] = None,
    ) -> ActionResult:
        """Onboard an employee with the standard opening balances."""
        denied = await AccessService.require_roles(store, caller, APPROVER_ROLES, action="Add Emp")
        if denied:
            return denied

        today = today or local_today()
        employees = await store.read_table(Table.employees)
        emp_id = form.emp_id.strip()
        email = str(form.email).strip()

        if any(e["emp_id"] == emp_id for e in employees):
            return ActionResult.conflict("Employee with this ID already exists.")
        if any(str(e["email"]).strip().lower() == email.lower() for e in employees):
            return ActionResult.conflict("Employee with this email already exists.")

        problem = validate_contact(form.mobile, form.dob, today)
        if problem:
            return ActionResult.fail(problem)

        manager_id = (form.manager_id or "").strip() or None
        forest = ReportingForest.from_records(employees)
        if manager_id and manager_id not in forest:
            return ActionResult.fail("Manager not found.")
        if forest.would_cycle(emp_id, manager_id):
            return ActionResult.fail("Reporting line would form a cycle.")

        record = await store.append_row(
            Table.employees,
            [
                emp_id,
                form.name.strip(),
                email,
                form.role.value,
                form.department,
                form.designation,
                form.doj,
                form.dob,
                form.mobile,
                EmployeeStatus.active.value,
                0,
                settings.DEFAULT_SICK_LEAVE,
                0,
                0,
                form.doj,
                manager_id,
            ],
        )
        await record_action(store, actor=caller.email, action="Add Emp", details=form.name)
        return ActionResult.ok("Employee Added", data=rounded(record))

    @staticmethod
    async def update_profile(
        store: TabularStore,
        caller: CallerContext,
        form: ProfileUpdateRequest,
        today: Optional[date] = None,
    ) -> ActionResult:
        """Self-service update of the caller's mobile number and DOB."""
        problem = validate_contact(
            form.mobile, form.dob, today or local_today(), self_service=True,
        )
        if problem:
            return ActionResult.fail(problem)

        record = await store.find_one(Table.employees, emp_id=caller.emp_id)
        if record is None:
            return ActionResult.not_found("Could not find your employee record to update.")

        await store.update_cells(
            Table.employees, RowRef.of(record), {"mobile": form.mobile, "dob": form.dob},
        )
        await record_action(
            store,
            actor=caller.email,
            action="Profile Update",
            details=f"User {caller.email} updated their profile.",
        )
        return ActionResult.ok("Profile updated successfully!")

    @staticmethod
    async def reassign_manager(
        store: TabularStore,
        caller: CallerContext,
        emp_id: str,
        manager_id: Optional[str],
    ) -> ActionResult:
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Manager Change",
        )
        if denied:
            return denied

        employees = await store.read_table(Table.employees)
        record = next((e for e in employees if e["emp_id"] == emp_id), None)
        if record is None:
            return ActionResult.not_found("Employee not found")

        manager_id = (manager_id or "").strip() or None
        forest = ReportingForest.from_records(employees)
        if manager_id and manager_id not in forest:
            return ActionResult.fail("Manager not found.")
        if forest.would_cycle(emp_id, manager_id):
            return ActionResult.fail("Reporting line would form a cycle.")

        await store.update_cell(Table.employees, RowRef.of(record), "manager_id", manager_id)
        await record_action(
            store,
            actor=caller.email,
            action="Manager Change",
            details=f"{emp_id} now reports to {manager_id or 'nobody'}",
        )
        return ActionResult.ok("Manager updated")

    @staticmethod
    async def set_status(
        store: TabularStore,
        caller: CallerContext,
        emp_id: str,
        status: EmployeeStatus,
    ) -> ActionResult:
        """Activate or deactivate; inactive employees stop accruing."""
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Status Change",
        )
        if denied:
            return denied

        record = await store.find_one(Table.employees, emp_id=emp_id)
        if record is None:
            return ActionResult.not_found("Employee not found")

        await store.update_cell(Table.employees, RowRef.of(record), "status", status.value)
        await record_action(
            store,
            actor=caller.email,
            action="Status Change",
            details=f"{emp_id} set to {status.value}",
        )
        return ActionResult.ok(f"Employee marked {status.value}")

    @staticmethod
    async def list_employees(store: TabularStore) -> list[Record]:
        return [rounded(e) for e in await store.read_table(Table.employees)]

    @staticmethod
    async def get_employee(store: TabularStore, emp_id: str) -> Optional[Record]:
        record = await store.find_one(Table.employees, emp_id=emp_id)
        return rounded(record) if record else None

    @staticmethod
    async def reporting_cycles(store: TabularStore) -> list[list[str]]:
        """Loops in reporting lines saved before cycle checks existed."""
        forest = ReportingForest.from_records(await store.read_table(Table.employees))
        cycles = forest.cycles()
        if cycles:
            logger.warning("Found %d reporting cycle(s): %s", len(cycles), cycles)
        return cycles
