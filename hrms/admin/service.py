"""Administration service — provisioning, settings, audit log access."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Mapping, Optional

from hrms.admin.seeds import DEFAULT_HOLIDAYS, DEFAULT_TEMPLATES
from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.clock import local_today
from hrms.common.constants import (
    SUPER_ADMIN_ID,
    EmployeeStatus,
    Table,
    UserRole,
)
from hrms.common.results import ActionResult
from hrms.config import settings
from hrms.store.service import RowRef, TabularStore

logger = logging.getLogger(__name__)


class AdminService:
    """Async administration operations."""

    @staticmethod
    async def setup_system(
        store: TabularStore,
        admin_email: str,
        today: Optional[date] = None,
    ) -> ActionResult:
        """Provision an empty system. Safe to run again: only empty tables are seeded.

        Creates the super admin (CL 0 so pro-rata accrual starts from
        today), the first log entry, a welcome announcement, the default
        holidays and the default document templates.
        """
        admin_email = (admin_email or "").strip()
        if not admin_email:
            return ActionResult.fail("An admin e-mail is required.")
        today = today or local_today()
        summary = {"admin_created": False, "holidays_added": 0, "templates_added": 0}

        if await store.find_one(Table.employees, emp_id=SUPER_ADMIN_ID) is None:
            await store.append_row(
                Table.employees,
                [
                    SUPER_ADMIN_ID,
                    "Super Admin",
                    admin_email,
                    UserRole.admin.value,
                    "Mgmt",
                    "Director",
                    today,
                    None,
                    "9999999999",
                    EmployeeStatus.active.value,
                    0,
                    settings.DEFAULT_SICK_LEAVE,
                    0,
                    0,
                    today,
                    None,
                ],
            )
            await record_action(
                store, actor="System", action="Setup", details="Database Initialized", meta="Server",
            )
            await store.append_row(
                Table.announcements,
                [datetime.now(timezone.utc), "Welcome", "Welcome to HRMS.", "System"],
            )
            summary["admin_created"] = True

        if not await store.read_table(Table.holidays):
            for row in DEFAULT_HOLIDAYS:
                await store.append_row(Table.holidays, row)
            summary["holidays_added"] = len(DEFAULT_HOLIDAYS)

        if not await store.read_table(Table.document_templates):
            for row in DEFAULT_TEMPLATES:
                await store.append_row(Table.document_templates, row)
            summary["templates_added"] = len(DEFAULT_TEMPLATES)

        logger.info("System setup: %s", summary)
        return ActionResult.ok("System ready.", data=summary)

    # ─────────────────────────────────────────────────────────────────
    # Settings
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def get_settings(store: TabularStore, caller: CallerContext) -> ActionResult:
        denied = await AccessService.require_roles(
            store, caller, [UserRole.admin], action="Settings Read",
        )
        if denied:
            return denied
        rows = await store.read_table(Table.app_settings)
        return ActionResult.ok("OK", data={r["setting"]: r["value"] for r in rows})

    @staticmethod
    async def update_settings(
        store: TabularStore,
        caller: CallerContext,
        values: Mapping[str, str],
    ) -> ActionResult:
        """Upsert key/value settings (ADMIN only)."""
        denied = await AccessService.require_roles(
            store, caller, [UserRole.admin], action="Settings Update",
        )
        if denied:
            return denied

        existing = {r["setting"]: r for r in await store.read_table(Table.app_settings)}
        for key, value in values.items():
            row = existing.get(key)
            if row is None:
                await store.append_row(Table.app_settings, [key, value])
            else:
                await store.update_cell(Table.app_settings, RowRef.of(row), "value", value)

        await record_action(
            store,
            actor=caller.email,
            action="Settings Update",
            details=f"User {caller.email} updated settings.",
        )
        return ActionResult.ok("Settings updated successfully!")

    # ─────────────────────────────────────────────────────────────────
    # Audit log
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def list_logs(
        store: TabularStore,
        caller: CallerContext,
        action: Optional[str] = None,
        limit: int = 100,
    ) -> ActionResult:
        """Newest audit entries first (ADMIN only)."""
        denied = await AccessService.require_roles(
            store, caller, [UserRole.admin], action="Log Access",
        )
        if denied:
            return denied
        filters = {"action": action} if action else {}
        rows = await store.read_table(Table.system_logs, **filters)
        return ActionResult.ok("OK", data=list(reversed(rows))[:limit])
