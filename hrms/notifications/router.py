"""Notification endpoints — outbox inspection and delivery (ADMIN only)."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.constants import OutboxStatus, UserRole
from hrms.common.results import ActionResult, settle
from hrms.notifications.schemas import OutboxMessageOut
from hrms.notifications.service import NotificationService
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["notifications"])


# ── GET /outbox — queued, sent and failed messages ──────────────────

@router.get("/outbox", response_model=list[OutboxMessageOut])
async def list_outbox(
    status: Optional[OutboxStatus] = Query(default=None, description="Filter by delivery status"),
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    denied = await AccessService.require_roles(store, caller, [UserRole.admin], action="Outbox Read")
    if denied:
        await settle(store, denied)
    return await NotificationService.list_messages(store, status)


# ── POST /outbox/dispatch — deliver queued messages now ─────────────

@router.post("/outbox/dispatch", response_model=ActionResult)
async def dispatch_outbox(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    denied = await AccessService.require_roles(
        store, caller, [UserRole.admin], action="Outbox Dispatch",
    )
    if denied:
        await settle(store, denied)
    return await NotificationService.dispatch_pending(store)
