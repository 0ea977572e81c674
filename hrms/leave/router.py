"""Leave router — apply, approve/reject, balances, day-count preview, jobs.

All endpoints require authentication. Decision and adjustment rules are
enforced in the service so that denials are audited.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request

from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.constants import UserRole
from hrms.common.rate_limit import WRITE_LIMIT, limiter
from hrms.common.results import ActionResult, settle
from hrms.leave.jobs import LeaveJob, run_job
from hrms.leave.ledger import BalanceLedger
from hrms.leave.schemas import (
    BalanceAdjustRequest,
    BalanceOut,
    DayCountOut,
    JobRunOut,
    LeaveApplyRequest,
    LeaveDataOut,
    LeaveDecisionRequest,
)
from hrms.leave.service import LeaveService
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["leave"])


# ── POST /apply ─────────────────────────────────────────────────────

@router.post("/apply", response_model=ActionResult, status_code=201)
@limiter.limit(WRITE_LIMIT)
async def apply_leave(
    request: Request,
    body: LeaveApplyRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Apply for leave. Checks the day count and the balance net of pending requests."""
    return await settle(store, await LeaveService.submit(store, caller, body))


# ── GET / — my requests + requests awaiting my decision ─────────────

@router.get("", response_model=LeaveDataOut)
async def leave_data(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await LeaveService.get_leave_data(store, caller)


# ── GET /preview ────────────────────────────────────────────────────

@router.get("/preview", response_model=DayCountOut)
async def preview_days(
    start_date: date = Query(...),
    end_date: date = Query(...),
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Working days in a range, and the weekends/holidays excluded."""
    count = await LeaveService.preview(store, start_date, end_date)
    return DayCountOut(
        days=count.days,
        excluded_count=count.excluded_count,
        excluded_dates=count.excluded_dates,
    )


# ── PUT /{id}/approve ───────────────────────────────────────────────

@router.put("/{request_id}/approve", response_model=ActionResult)
@limiter.limit(WRITE_LIMIT)
async def approve_leave(
    request: Request,
    request_id: str,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Approve a pending request and deduct its days from the balance."""
    return await settle(store, await LeaveService.approve(store, caller, request_id))


# ── PUT /{id}/reject ────────────────────────────────────────────────

@router.put("/{request_id}/reject", response_model=ActionResult)
async def reject_leave(
    request_id: str,
    body: LeaveDecisionRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await settle(
        store, await LeaveService.reject(store, caller, request_id, body.note),
    )


# ── GET /balance ────────────────────────────────────────────────────

@router.get("/balance", response_model=BalanceOut)
async def my_balance(caller: CallerContext = Depends(get_caller)):
    """The caller's balances, rounded to 2 places."""
    return BalanceOut(
        emp_id=caller.emp_id,
        casual=caller.bal_cl,
        sick=caller.bal_sl,
        maternity=caller.bal_mat,
        paternity=caller.bal_pat,
    )


# ── POST /balance/adjust ────────────────────────────────────────────

@router.post("/balance/adjust", response_model=ActionResult)
async def adjust_balance(
    body: BalanceAdjustRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """ADMIN/HR manual balance correction."""
    result = await BalanceLedger.adjust(
        store, caller, body.emp_id, body.key, body.amount, body.reason,
    )
    return await settle(store, result)


# ── POST /jobs/{job} ────────────────────────────────────────────────

@router.post("/jobs/{job}", response_model=JobRunOut)
async def trigger_job(
    job: LeaveJob,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Run one accrual or carry-over job now (ADMIN). Once per day per job."""
    denied = await AccessService.require_roles(
        store, caller, [UserRole.admin], action="Job Run",
    )
    if denied:
        return await settle(store, denied)
    result = await settle(store, await run_job(store, job))
    return JobRunOut(
        job=result.data["job"],
        run_date=result.data["run_date"],
        skipped=result.data["skipped"],
        msg=result.msg,
    )
