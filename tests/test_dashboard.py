"""Dashboard tests — headline counts and announcements."""

from __future__ import annotations

from datetime import date

import sqlalchemy as sa

from hrms.common.constants import FailureKind, Table
from hrms.dashboard.service import DashboardService
from tests.conftest import auth_headers_for, caller_of


class TestStats:

    async def test_counts(self, store, org):
        await store.append_row(
            Table.leave_requests,
            {
                "request_id": "REQ-1",
                "emp_id": "EMP-001",
                "name": "Esha Employee",
                "leave_type": "Casual Leave",
                "start_date": date(2025, 1, 6),
                "end_date": date(2025, 1, 6),
                "days": 1,
                "status": "Pending",
            },
        )
        stats = await DashboardService.get_stats(store)
        assert stats["employee_count"] == 5
        assert stats["pending_leaves"] == 1
        assert stats["logs"] == []
        assert stats["announcements"] == []


class TestAnnouncements:

    async def test_hr_posts_and_everyone_is_queued(self, store, org):
        result = await DashboardService.create_announcement(
            store, caller_of(org["hr"]), "Town hall", "Friday at 4pm",
        )
        assert result.msg == "Announcement Posted"
        assert result.data["posted_by"] == "Hema HR"

        queued = await store.read_table(Table.notification_outbox)
        assert len(queued) == 5
        assert {q["subject"] for q in queued} == {"Announcement: Town hall"}
        assert await store.read_table(Table.system_logs, action="Announcement Post")

    async def test_newest_first(self, store, org):
        hr = caller_of(org["hr"])
        await DashboardService.create_announcement(store, hr, "First", "one")
        await DashboardService.create_announcement(store, hr, "Second", "two")
        titles = [a["title"] for a in await DashboardService.list_announcements(store)]
        assert titles == ["Second", "First"]

    async def test_employee_cannot_post(self, store, org):
        result = await DashboardService.create_announcement(
            store, caller_of(org["employee"]), "Party", "Now",
        )
        assert result.error == FailureKind.authorization
        assert await store.read_table(Table.announcements) == []
        assert await store.read_table(Table.notification_outbox) == []

    async def test_outbox_database_error_keeps_announcement(self, store, org, monkeypatch):
        async def broken_outbox(store, *args, **kwargs):
            await store.session.execute(sa.text("SELECT * FROM missing_outbox"))

        monkeypatch.setattr("hrms.dashboard.service.notify_announcement", broken_outbox)
        result = await DashboardService.create_announcement(
            store, caller_of(org["hr"]), "Town hall", "Friday at 4pm",
        )
        await store.commit()

        assert result.msg == "Announcement Posted"
        assert [a["title"] for a in await store.read_table(Table.announcements)] == ["Town hall"]
        assert await store.read_table(Table.notification_outbox) == []
        assert await store.read_table(Table.system_logs, action="Announcement Email Failed")

    async def test_blank_fields(self, store, org):
        result = await DashboardService.create_announcement(store, caller_of(org["hr"]), " ", "x")
        assert result.msg == "Please fill out all fields."


class TestDashboardAPI:

    async def test_stats_endpoint(self, client, org):
        response = await client.get(
            "/api/v1/dashboard/stats", headers=auth_headers_for("employee@example.com"),
        )
        assert response.status_code == 200
        assert response.json()["employee_count"] == 5

    async def test_post_announcement(self, client, org):
        response = await client.post(
            "/api/v1/dashboard/announcements",
            json={"title": "Holiday", "message": "Office closed Monday"},
            headers=auth_headers_for("hr@example.com"),
        )
        assert response.status_code == 201
        listed = await client.get(
            "/api/v1/dashboard/announcements", headers=auth_headers_for("employee@example.com"),
        )
        assert [a["title"] for a in listed.json()] == ["Holiday"]
