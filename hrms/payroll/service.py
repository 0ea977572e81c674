"""Payroll service — payslip records."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.clock import generate_id, local_today
from hrms.common.constants import APPROVER_ROLES, Table
from hrms.common.results import ActionResult
from hrms.store.service import Record, TabularStore


class PayrollService:
    """Async payroll operations."""

    @staticmethod
    async def generate(
        store: TabularStore,
        caller: CallerContext,
        emp_id: str,
        month: str,
        year: int,
        net_pay: Decimal,
        file_url: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ActionResult:
        """Record a payslip (ADMIN/HR)."""
        if not (emp_id and month and year and net_pay):
            return ActionResult.fail("Please fill out all fields.")
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Payroll Generate",
        )
        if denied:
            return denied
        if await store.find_one(Table.employees, emp_id=emp_id) is None:
            return ActionResult.not_found("Employee not found")

        record = await store.append_row(
            Table.payslips,
            [generate_id("PAYSLIP"), emp_id, month, year, net_pay, today or local_today(), file_url],
        )
        await record_action(
            store,
            actor=caller.email,
            action="Payroll Generate",
            details=f"For {emp_id} - {month}/{year}",
        )
        return ActionResult.ok("Payroll Generated", data=record)

    @staticmethod
    async def list_payslips(store: TabularStore, caller: CallerContext) -> list[Record]:
        """Every payslip for ADMIN/HR; otherwise the caller's own."""
        if caller.is_approver:
            return await store.read_table(Table.payslips)
        return await store.read_table(Table.payslips, emp_id=caller.emp_id)
