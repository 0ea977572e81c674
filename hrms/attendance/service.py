"""Attendance service — punches, history, daily summaries, holidays."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.clock import format_date, format_time, local_now
from hrms.common.constants import (
    APPROVER_ROLES,
    RECORD_VIEWER_ROLES,
    PunchType,
    Table,
)
from hrms.common.results import ActionResult
from hrms.leave.calendar import is_non_working_day, load_holidays
from hrms.store.service import Record, TabularStore

logger = logging.getLogger(__name__)


def map_link(lat: Optional[float], lng: Optional[float]) -> Optional[str]:
    if lat is None or lng is None:
        return None
    return f"https://maps.google.com/?q={lat},{lng}"


def _short(punch_type: str) -> str:
    return "IN" if punch_type == PunchType.check_in.value else "OUT"


class AttendanceService:
    """Async attendance operations."""

    # ─────────────────────────────────────────────────────────────────
    # Punches
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def mark(
        store: TabularStore,
        caller: CallerContext,
        punch_type: PunchType,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        device: str = "Web",
        now: Optional[datetime] = None,
    ) -> ActionResult:
        """Record a check-in or check-out for today (reference zone)."""
        now = now or local_now()
        today = now.date()
        if is_non_working_day(today, await load_holidays(store)):
            return ActionResult.fail("Today is a holiday or non-working day.")

        todays = await store.read_table(
            Table.attendance, emp_id=caller.emp_id, punch_date=today,
        )
        if any(r["punch_type"] == punch_type.value for r in todays):
            return ActionResult.conflict(f"You already marked {punch_type.value} today.")

        await store.append_row(
            Table.attendance,
            [
                today,
                caller.emp_id,
                caller.name,
                punch_type.value,
                now.time().replace(microsecond=0),
                lat,
                lng,
                map_link(lat, lng),
                device,
            ],
        )
        await record_action(
            store,
            actor=caller.email,
            action="Attendance",
            details=f"{punch_type.value} - {caller.name}",
        )
        return ActionResult.ok(f"{punch_type.value} Recorded.")

    # ─────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def history(store: TabularStore, caller: CallerContext) -> list[Record]:
        """All records for ADMIN/HR/ACCOUNTANT (audited), otherwise the caller's own."""
        if caller.has_role(RECORD_VIEWER_ROLES):
            await record_action(
                store,
                actor=caller.email,
                action="Attendance Access",
                details=(
                    f"User {caller.email} with role {caller.role} "
                    "accessed all attendance records."
                ),
            )
            return await store.read_table(Table.attendance)
        return await store.read_table(Table.attendance, emp_id=caller.emp_id)

    @staticmethod
    async def today(
        store: TabularStore,
        caller: CallerContext,
        today: Optional[date] = None,
    ) -> dict:
        today = today or local_now().date()
        rows = await store.read_table(Table.attendance, emp_id=caller.emp_id, punch_date=today)
        check_in = next((r for r in rows if r["punch_type"] == PunchType.check_in.value), None)
        check_out = next((r for r in rows if r["punch_type"] == PunchType.check_out.value), None)
        return {
            "check_in": check_in["punch_time"] if check_in else None,
            "check_out": check_out["punch_time"] if check_out else None,
        }

    @staticmethod
    async def search(
        store: TabularStore,
        caller: CallerContext,
        punch_date: Optional[date] = None,
        name: Optional[str] = None,
    ) -> list[Record]:
        filters = {}
        if not caller.has_role(RECORD_VIEWER_ROLES):
            filters["emp_id"] = caller.emp_id
        if punch_date is not None:
            filters["punch_date"] = punch_date
        rows = await store.read_table(Table.attendance, **filters)
        if name:
            needle = name.lower()
            rows = [r for r in rows if needle in (r.get("name") or "").lower()]
        return rows

    @staticmethod
    async def daily_summary(
        store: TabularStore,
        caller: CallerContext,
        day: date,
    ) -> ActionResult:
        """Map points, worked hours and punch log for one day (ADMIN/HR)."""
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Attendance Summary",
        )
        if denied:
            return denied

        rows = await store.read_table(Table.attendance, punch_date=day)
        map_points = [
            {"lat": r["lat"], "lng": r["lng"], "label": f"{r['name']} ({r['punch_type']})"}
            for r in rows
            if r.get("lat") is not None and r.get("lng") is not None
        ]

        spans: dict[str, dict] = {}
        logs = []
        for r in rows:
            span = spans.setdefault(r["emp_id"], {"name": r["name"], "in": None, "out": None})
            at = datetime.combine(r["punch_date"], r["punch_time"])
            if r["punch_type"] == PunchType.check_in.value:
                span["in"] = at
            elif r["punch_type"] == PunchType.check_out.value:
                span["out"] = at
            logs.append({"emp_id": r["emp_id"], "name": r["name"], "type": _short(r["punch_type"])})

        hours = [
            {
                "emp_id": emp_id,
                "name": span["name"],
                "hours": round((span["out"] - span["in"]).total_seconds() / 3600, 2),
            }
            for emp_id, span in spans.items()
            if span["in"] and span["out"]
        ]
        return ActionResult.ok(
            "OK",
            data={"day": day, "map_points": map_points, "hours": hours, "logs": logs},
        )

    @staticmethod
    async def employee_daily_details(
        store: TabularStore,
        caller: CallerContext,
        emp_id: str,
        day: date,
    ) -> ActionResult:
        if emp_id != caller.emp_id:
            denied = await AccessService.require_roles(
                store, caller, RECORD_VIEWER_ROLES, action="Attendance Details",
            )
            if denied:
                return denied
        rows = await store.read_table(Table.attendance, emp_id=emp_id, punch_date=day)
        return ActionResult.ok(
            "OK",
            data=[
                {
                    "type": _short(r["punch_type"]),
                    "punch_time": r["punch_time"],
                    "lat": r["lat"],
                    "lng": r["lng"],
                }
                for r in rows
            ],
        )

    @staticmethod
    def server_time() -> dict:
        now = local_now()
        return {"date": format_date(now), "time": format_time(now)}


# ═════════════════════════════════════════════════════════════════════
# HolidayService
# ═════════════════════════════════════════════════════════════════════


class HolidayService:
    """Async holiday list operations."""

    @staticmethod
    async def list_holidays(store: TabularStore, year: Optional[int] = None) -> list[Record]:
        rows = await store.read_table(Table.holidays)
        if year is not None:
            rows = [r for r in rows if r["holiday_date"].year == year]
        return sorted(rows, key=lambda r: r["holiday_date"])

    @staticmethod
    async def create(
        store: TabularStore,
        caller: CallerContext,
        holiday_date: date,
        title: str,
        holiday_type: str = "Public",
    ) -> ActionResult:
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Holiday Create",
        )
        if denied:
            return denied
        if await store.find_one(Table.holidays, holiday_date=holiday_date):
            return ActionResult.conflict("A holiday already exists on this date.")

        record = await store.append_row(Table.holidays, [holiday_date, title, holiday_type])
        await record_action(
            store,
            actor=caller.email,
            action="Holiday Create",
            details=f"{title} on {holiday_date.isoformat()}",
        )
        return ActionResult.ok("Holiday Added", data=record)
