"""Payroll router — payslips."""

from fastapi import APIRouter, Depends

from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.common.results import ActionResult, settle
from hrms.payroll.schemas import PayslipCreateRequest, PayslipOut
from hrms.payroll.service import PayrollService
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["payroll"])


# ── GET /payslips ───────────────────────────────────────────────────

@router.get("/payslips", response_model=list[PayslipOut])
async def list_payslips(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await PayrollService.list_payslips(store, caller)


# ── POST /payslips ──────────────────────────────────────────────────

@router.post("/payslips", response_model=ActionResult, status_code=201)
async def generate_payslip(
    body: PayslipCreateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await PayrollService.generate(
        store, caller, body.emp_id, body.month, body.year, body.net_pay, body.file_url,
    )
    return await settle(store, result)
