"""Attendance router — punches, history, summaries, holidays."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from hrms.attendance.schemas import (
    AttendanceOut,
    DailySummaryOut,
    HolidayCreateRequest,
    HolidayOut,
    PunchDetailOut,
    PunchRequest,
    ServerTimeOut,
    TodayOut,
)
from hrms.attendance.service import AttendanceService, HolidayService
from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.common.results import ActionResult, settle
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["attendance"])
holidays_router = APIRouter(prefix="", tags=["holidays"])


# ── POST /mark ──────────────────────────────────────────────────────

@router.post("/mark", response_model=ActionResult, status_code=201)
async def mark_attendance(
    body: PunchRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await AttendanceService.mark(
        store, caller, body.punch_type, body.lat, body.lng, body.device,
    )
    return await settle(store, result)


# ── GET /history ────────────────────────────────────────────────────

@router.get("/history", response_model=list[AttendanceOut])
async def attendance_history(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await AttendanceService.history(store, caller)


# ── GET /today ──────────────────────────────────────────────────────

@router.get("/today", response_model=TodayOut)
async def todays_attendance(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await AttendanceService.today(store, caller)


# ── GET /search ─────────────────────────────────────────────────────

@router.get("/search", response_model=list[AttendanceOut])
async def search_attendance(
    punch_date: Optional[date] = Query(None),
    name: Optional[str] = Query(None),
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await AttendanceService.search(store, caller, punch_date, name)


# ── GET /summary/{day} ──────────────────────────────────────────────

@router.get("/summary/{day}", response_model=DailySummaryOut)
async def daily_summary(
    day: date,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """Map points, hours and punch log for one day (ADMIN/HR)."""
    result = await settle(store, await AttendanceService.daily_summary(store, caller, day))
    return result.data


# ── GET /employees/{emp_id}/{day} ───────────────────────────────────

@router.get("/employees/{emp_id}/{day}", response_model=list[PunchDetailOut])
async def employee_daily_details(
    emp_id: str,
    day: date,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await AttendanceService.employee_daily_details(store, caller, emp_id, day)
    return (await settle(store, result)).data


# ── GET /server-time (no auth) ──────────────────────────────────────

@router.get("/server-time", response_model=ServerTimeOut)
async def server_time():
    return AttendanceService.server_time()


# ── Holidays ────────────────────────────────────────────────────────

@holidays_router.get("", response_model=list[HolidayOut])
async def list_holidays(
    year: Optional[int] = Query(None),
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await HolidayService.list_holidays(store, year)


@holidays_router.post("", response_model=ActionResult, status_code=201)
async def create_holiday(
    body: HolidayCreateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await HolidayService.create(
        store, caller, body.holiday_date, body.title, body.holiday_type,
    )
    return await settle(store, result)
