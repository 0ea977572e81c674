"""Dashboard service — headline counts and announcements."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.constants import APPROVER_ROLES, LeaveStatus, Table
from hrms.common.results import ActionResult
from hrms.notifications.service import notify_announcement
from hrms.store.service import TabularStore

logger = logging.getLogger(__name__)

RECENT_LOGS = 10
RECENT_ANNOUNCEMENTS = 5


class DashboardService:
    """Async dashboard operations."""

    @staticmethod
    async def get_stats(store: TabularStore) -> dict:
        employees = await store.read_table(Table.employees)
        pending = await store.read_table(Table.leave_requests, status=LeaveStatus.pending.value)
        logs = await store.read_table(Table.system_logs)
        announcements = await store.read_table(Table.announcements)
        return {
            "employee_count": len(employees),
            "pending_leaves": len(pending),
            "logs": list(reversed(logs))[:RECENT_LOGS],
            "announcements": list(reversed(announcements))[:RECENT_ANNOUNCEMENTS],
        }

    @staticmethod
    async def list_announcements(store: TabularStore) -> list[dict]:
        return list(reversed(await store.read_table(Table.announcements)))

    @staticmethod
    async def create_announcement(
        store: TabularStore,
        caller: CallerContext,
        title: str,
        message: str,
    ) -> ActionResult:
        """Post an announcement (ADMIN/HR) and queue it for every employee."""
        if not (title or "").strip() or not (message or "").strip():
            return ActionResult.fail("Please fill out all fields.")
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Announcement Post",
        )
        if denied:
            return denied

        record = await store.append_row(
            Table.announcements,
            [datetime.now(timezone.utc), title, message, caller.name],
        )
        await record_action(store, actor=caller.email, action="Announcement Post", details=title)

        try:
            async with store.savepoint():
                queued = await notify_announcement(
                    store, await store.read_table(Table.employees), title, message, caller.name,
                )
            logger.info("Announcement '%s' queued for %d recipients", title, queued)
        except Exception as exc:
            logger.warning("Announcement notification failed: %s", exc)
            await record_action(
                store,
                actor=caller.email,
                action="Announcement Email Failed",
                details=str(exc),
            )
        return ActionResult.ok("Announcement Posted", data=record)
