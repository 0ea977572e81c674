"""Employees router — onboarding, profile, reporting lines, directory."""

from fastapi import APIRouter, Depends

from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.constants import APPROVER_ROLES
from hrms.common.exceptions import NotFoundException
from hrms.common.results import ActionResult, settle
from hrms.core_hr.schemas import (
    EmployeeCreateRequest,
    EmployeeOut,
    ManagerUpdateRequest,
    ProfileUpdateRequest,
    StatusUpdateRequest,
)
from hrms.core_hr.service import EmployeeService
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["employees"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("", response_model=list[EmployeeOut])
async def list_employees(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await EmployeeService.list_employees(store)


# ── POST / ──────────────────────────────────────────────────────────

@router.post("", response_model=ActionResult, status_code=201)
async def create_employee(
    body: EmployeeCreateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Onboard an employee (ADMIN/HR)."""
    return await settle(store, await EmployeeService.create(store, caller, body))


# ── PUT /me/profile ─────────────────────────────────────────────────

@router.put("/me/profile", response_model=ActionResult)
async def update_my_profile(
    body: ProfileUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await settle(store, await EmployeeService.update_profile(store, caller, body))


# ── GET /cycles ─────────────────────────────────────────────────────

@router.get("/cycles", response_model=list[list[str]])
async def reporting_cycles(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Reporting loops present in existing data (ADMIN/HR)."""
    denied = await AccessService.require_roles(
        store, caller, APPROVER_ROLES, action="Cycle Report",
    )
    if denied:
        await settle(store, denied)
    return await EmployeeService.reporting_cycles(store)


# ── GET /{emp_id} ───────────────────────────────────────────────────

@router.get("/{emp_id}", response_model=EmployeeOut)
async def get_employee(
    emp_id: str,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    record = await EmployeeService.get_employee(store, emp_id)
    if record is None:
        raise NotFoundException("Employee not found")
    return record


# ── PUT /{emp_id}/manager ───────────────────────────────────────────

@router.put("/{emp_id}/manager", response_model=ActionResult)
async def reassign_manager(
    emp_id: str,
    body: ManagerUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await EmployeeService.reassign_manager(store, caller, emp_id, body.manager_id)
    return await settle(store, result)


# ── PUT /{emp_id}/status ────────────────────────────────────────────

@router.put("/{emp_id}/status", response_model=ActionResult)
async def set_status(
    emp_id: str,
    body: StatusUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await EmployeeService.set_status(store, caller, emp_id, body.status)
    return await settle(store, result)
