"""Admin router — settings and audit log (ADMIN only)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrms.admin.schemas import SettingsUpdateRequest
from hrms.admin.service import AdminService
from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.common.results import ActionResult, settle
from hrms.dashboard.schemas import LogEntryOut
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["admin"])


@router.get("/settings", response_model=dict[str, Optional[str]])
async def get_settings(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return (await settle(store, await AdminService.get_settings(store, caller))).data


@router.put("/settings", response_model=ActionResult)
async def update_settings(
    body: SettingsUpdateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await settle(store, await AdminService.update_settings(store, caller, body.values))


@router.get("/logs", response_model=list[LogEntryOut])
async def list_logs(
    action: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await AdminService.list_logs(store, caller, action=action, limit=limit)
    return (await settle(store, result)).data
