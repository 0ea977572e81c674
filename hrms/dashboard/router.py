"""Dashboard router — stats and announcements."""

from fastapi import APIRouter, Depends

from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.common.results import ActionResult, settle
from hrms.dashboard.schemas import (
    AnnouncementCreateRequest,
    AnnouncementOut,
    DashboardStatsOut,
)
from hrms.dashboard.service import DashboardService
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["dashboard"])


# ── GET /stats ──────────────────────────────────────────────────────

@router.get("/stats", response_model=DashboardStatsOut)
async def dashboard_stats(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await DashboardService.get_stats(store)


# ── Announcements ───────────────────────────────────────────────────

@router.get("/announcements", response_model=list[AnnouncementOut])
async def list_announcements(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await DashboardService.list_announcements(store)


@router.post("/announcements", response_model=ActionResult, status_code=201)
async def create_announcement(
    body: AnnouncementCreateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await DashboardService.create_announcement(store, caller, body.title, body.message)
    return await settle(store, result)
