"""Leave service layer — submission, approval and rejection of leave requests.

Business logic:
  - Day count is 0.5 for half-day sessions, otherwise the working days in
    the range. It is stored on the request and never recomputed.
  - Pending requests of the same type label reserve balance, so two
    pending requests cannot spend the same days twice.
  - Approval deducts the stored day count, with no floor at zero.
  - Only ADMIN/HR or the requester's manager of record may decide.
  - Notifications are queued best-effort; a failure is audited as
    "Email Failed" and never fails the operation.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from hrms.auth.schemas import CallerContext
from hrms.common.audit import record_action
from hrms.common.clock import generate_id
from hrms.common.constants import LeaveSession, LeaveStatus, Table
from hrms.common.results import ActionResult
from hrms.leave.calendar import WorkingDayCount, count_working_days_detailed, load_holidays
from hrms.leave.ledger import BalanceLedger, resolve_balance_key, to_decimal
from hrms.leave.schemas import LeaveApplyRequest
from hrms.notifications.service import notify_leave_decided, notify_leave_submitted
from hrms.store.service import Record, RowRef, TabularStore

logger = logging.getLogger(__name__)

HALF_DAY_SESSIONS = {LeaveSession.first_half, LeaveSession.second_half}
HALF_DAY = Decimal("0.5")


def _fmt(value: Decimal) -> str:
    """Render a day count without trailing zeros (2.50 -> 2.5, 3.00 -> 3)."""
    return format(value.normalize(), "f")


# ═════════════════════════════════════════════════════════════════════
# LeaveService
# ═════════════════════════════════════════════════════════════════════


class LeaveService:
    """Async leave request operations."""

    # ─────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def preview(store: TabularStore, start: date, end: date) -> WorkingDayCount:
        """Working days in ``[start, end]`` and the dates that were skipped."""
        holidays = await load_holidays(store)
        return count_working_days_detailed(start, end, holidays)

    @staticmethod
    async def _requested_days(store: TabularStore, form: LeaveApplyRequest) -> Decimal:
        if form.session in HALF_DAY_SESSIONS:
            return HALF_DAY
        count = await LeaveService.preview(store, form.start_date, form.end_date)
        return Decimal(count.days)

    @staticmethod
    async def _pending_days(store: TabularStore, emp_id: str, leave_type: str) -> Decimal:
        """Days held by the employee's pending requests with this exact label."""
        rows = await store.read_table(
            Table.leave_requests, emp_id=emp_id, status=LeaveStatus.pending.value,
        )
        return sum(
            (to_decimal(r["days"]) for r in rows if r["leave_type"] == leave_type),
            Decimal("0"),
        )

    @staticmethod
    def _may_decide(caller: CallerContext, requester: Optional[Record]) -> bool:
        if caller.is_approver:
            return True
        return requester is not None and requester.get("manager_id") == caller.emp_id

    # ─────────────────────────────────────────────────────────────────
    # Submit
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def submit(
        store: TabularStore,
        caller: CallerContext,
        form: LeaveApplyRequest,
    ) -> ActionResult:
        days = await LeaveService._requested_days(store, form)
        if days <= 0:
            return ActionResult.fail("Invalid Dates or 0 leave days.")

        key = resolve_balance_key(form.leave_type)
        if key is not None:
            balance = await BalanceLedger.balance_of(store, caller.emp_id, key)
            pending = await LeaveService._pending_days(store, caller.emp_id, form.leave_type)
            available = balance - pending
            if available < days:
                return ActionResult.fail(
                    f"Insufficient Balance! Available: {_fmt(available)}, "
                    f"Requested: {_fmt(days)} (includes {_fmt(pending)} pending days)"
                )

        request = await store.append_row(
            Table.leave_requests,
            {
                "request_id": generate_id("LR"),
                "emp_id": caller.emp_id,
                "name": caller.name,
                "leave_type": form.leave_type,
                "start_date": form.start_date,
                "end_date": form.end_date,
                "reason": form.reason,
                "status": LeaveStatus.pending.value,
                "days": days,
                "session": form.session.value,
                "created_at": datetime.now(timezone.utc),
            },
        )
        await record_action(
            store,
            actor=caller.email,
            action="Leave Apply",
            details=f"{_fmt(days)} days {form.leave_type}",
        )

        try:
            async with store.savepoint():
                manager = None
                if caller.manager_id:
                    manager = await store.find_one(Table.employees, emp_id=caller.manager_id)
                await notify_leave_submitted(store, caller, manager, request)
        except Exception as exc:
            logger.warning("Leave notification failed for %s: %s", caller.email, exc)
            await record_action(
                store,
                actor=caller.email,
                action="Email Failed",
                details=f"Leave notification failed for {caller.name}. Error: {exc}",
            )

        return ActionResult.ok("Leave Applied successfully", data=request)

    # ─────────────────────────────────────────────────────────────────
    # Approve / reject
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def _load_for_decision(
        store: TabularStore,
        caller: CallerContext,
        request_id: str,
        action: str,
    ) -> tuple[Optional[Record], Optional[Record], Optional[ActionResult]]:
        """Shared guards: exists, still pending, caller may decide.

        The requester may come back as ``None`` when their employee row is
        gone; only ADMIN/HR get past the guard in that case.
        """
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        if request is None:
            return None, None, ActionResult.not_found("Request not found")
        if request["status"] != LeaveStatus.pending.value:
            return None, None, ActionResult.conflict("Already processed")

        requester = await store.find_one(Table.employees, emp_id=request["emp_id"])
        if not LeaveService._may_decide(caller, requester):
            await record_action(
                store,
                actor=caller.email,
                action=f"{action} Failed",
                details=f"Unauthorized attempt by {caller.emp_id} for {request_id}",
            )
            verb = "approve" if action == "Leave Approve" else "reject"
            return None, None, ActionResult.denied(
                f"You are not authorized to {verb} this request."
            )
        return request, requester, None

    @staticmethod
    async def approve(
        store: TabularStore,
        caller: CallerContext,
        request_id: str,
    ) -> ActionResult:
        request, requester, failure = await LeaveService._load_for_decision(
            store, caller, request_id, "Leave Approve",
        )
        if failure:
            return failure

        # Claim the request first: a concurrent decision makes this stale
        await store.update_cells(
            Table.leave_requests,
            RowRef.of(request),
            {
                "status": LeaveStatus.approved.value,
                "decided_by": caller.email,
                "decided_at": datetime.now(timezone.utc),
            },
        )
        # No employee row left to deduct from: the decision still stands
        key = resolve_balance_key(request["leave_type"])
        if key is not None and requester is not None:
            await BalanceLedger.deduct(store, request["emp_id"], key, request["days"])

        await record_action(
            store,
            actor=caller.email,
            action="Leave Approve",
            details=f"Approved {request_id} by {caller.email}",
        )
        if requester is None:
            return ActionResult.ok("Leave Approved & Balance Deducted")
        try:
            async with store.savepoint():
                await notify_leave_decided(store, caller, requester, request, approved=True)
        except Exception as exc:
            logger.warning("Approval notification failed for %s: %s", request_id, exc)
            await record_action(
                store,
                actor=caller.email,
                action="Email Failed",
                details=f"Approval notification failed for {request_id}: {exc}",
            )

        return ActionResult.ok("Leave Approved & Balance Deducted")

    @staticmethod
    async def reject(
        store: TabularStore,
        caller: CallerContext,
        request_id: str,
        note: Optional[str] = None,
    ) -> ActionResult:
        """Close a pending request without touching any balance."""
        request, requester, failure = await LeaveService._load_for_decision(
            store, caller, request_id, "Leave Reject",
        )
        if failure:
            return failure

        await store.update_cells(
            Table.leave_requests,
            RowRef.of(request),
            {
                "status": LeaveStatus.rejected.value,
                "decided_by": caller.email,
                "decided_at": datetime.now(timezone.utc),
                "decision_note": note,
            },
        )
        await record_action(
            store,
            actor=caller.email,
            action="Leave Reject",
            details=f"Rejected {request_id} by {caller.email}",
        )
        if requester is None:
            return ActionResult.ok("Leave Rejected")
        try:
            async with store.savepoint():
                await notify_leave_decided(
                    store, caller, requester, request, approved=False, note=note,
                )
        except Exception as exc:
            logger.warning("Rejection notification failed for %s: %s", request_id, exc)
            await record_action(
                store,
                actor=caller.email,
                action="Email Failed",
                details=f"Rejection notification failed for {request_id}: {exc}",
            )

        return ActionResult.ok("Leave Rejected")

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def get_leave_data(store: TabularStore, caller: CallerContext) -> dict:
        """The caller's own requests, plus the pending requests they can decide.

        ADMIN/HR see every pending request; anyone else sees the pending
        requests of their direct reports.
        """
        all_leaves = await store.read_table(Table.leave_requests)
        my_leaves = [r for r in all_leaves if r["emp_id"] == caller.emp_id]
        pending = [r for r in all_leaves if r["status"] == LeaveStatus.pending.value]

        if caller.is_approver:
            team_leaves = pending
        else:
            reports = {
                e["emp_id"]
                for e in await store.read_table(Table.employees, manager_id=caller.emp_id)
            }
            team_leaves = [r for r in pending if r["emp_id"] in reports]

        return {"my_leaves": my_leaves, "team_leaves": team_leaves}
