"""Notification outbox tests — enqueue, delivery outcomes, SMTP message shape."""

from __future__ import annotations

import pytest

from hrms.common.constants import OutboxStatus, Table, UserRole
from hrms.config import settings
from hrms.notifications.mailer import SmtpMailer
from hrms.notifications.service import NotificationService, notify_announcement
from tests.conftest import auth_headers_for, seed_employee


class RecordingMailer:
    """Collects what would have been sent; optionally fails every send."""

    def __init__(self, fail_with: Exception | None = None):
        self.sent: list[tuple[str, str, str]] = []
        self.fail_with = fail_with

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((to_address, subject, html_body))


class TestEnqueue:

    async def test_queued_row(self, store):
        record = await NotificationService.enqueue(store, " a@example.com ", "Hi", "<p>Hi</p>")
        assert record["to_address"] == "a@example.com"
        assert record["status"] == OutboxStatus.queued.value
        assert record["attempts"] == 0
        assert record["sent_at"] is None

    async def test_blank_recipient_is_refused(self, store):
        with pytest.raises(ValueError):
            await NotificationService.enqueue(store, "  ", "Hi", "<p>Hi</p>")

    async def test_announcement_skips_rows_without_email(self, store):
        queued = await notify_announcement(
            store,
            [{"email": "a@example.com"}, {"email": ""}, {"email": "b@example.com"}],
            "Office closed",
            "Friday <off>",
            "HR",
        )
        assert queued == 2
        rows = await store.read_table(Table.notification_outbox)
        assert rows[0]["subject"] == "Announcement: Office closed"
        assert "Friday &lt;off&gt;" in rows[0]["html_body"]


class TestDispatch:

    async def test_successful_delivery_marks_sent(self, store):
        await NotificationService.enqueue(store, "a@example.com", "Hi", "<p>Hi</p>")
        mailer = RecordingMailer()

        result = await NotificationService.dispatch_pending(store, mailer)
        assert result.data == {"sent": 1, "retried": 0, "failed": 0}
        assert mailer.sent == [("a@example.com", "Hi", "<p>Hi</p>")]

        row = (await store.read_table(Table.notification_outbox))[0]
        assert row["status"] == OutboxStatus.sent.value
        assert row["attempts"] == 1
        assert row["sent_at"] is not None

    async def test_sent_messages_are_not_resent(self, store):
        await NotificationService.enqueue(store, "a@example.com", "Hi", "<p>Hi</p>")
        await NotificationService.dispatch_pending(store, RecordingMailer())
        mailer = RecordingMailer()
        result = await NotificationService.dispatch_pending(store, mailer)
        assert mailer.sent == []
        assert result.data["sent"] == 0

    async def test_failure_retries_then_gives_up(self, store):
        await NotificationService.enqueue(store, "a@example.com", "Hi", "<p>Hi</p>")
        broken = RecordingMailer(fail_with=ConnectionRefusedError("smtp down"))

        first = await NotificationService.dispatch_pending(store, broken, max_attempts=2)
        assert first.data == {"sent": 0, "retried": 1, "failed": 0}
        row = (await store.read_table(Table.notification_outbox))[0]
        assert row["status"] == OutboxStatus.queued.value
        assert row["last_error"] == "smtp down"

        second = await NotificationService.dispatch_pending(store, broken, max_attempts=2)
        assert second.data == {"sent": 0, "retried": 0, "failed": 1}
        row = (await store.read_table(Table.notification_outbox))[0]
        assert row["status"] == OutboxStatus.failed.value
        assert row["attempts"] == 2

    async def test_one_failure_does_not_block_the_rest(self, store):
        await NotificationService.enqueue(store, "bad@example.com", "Hi", "x")
        await NotificationService.enqueue(store, "good@example.com", "Hi", "y")

        class Picky(RecordingMailer):
            def send(self, to_address, subject, html_body):
                if to_address.startswith("bad"):
                    raise RuntimeError("mailbox unavailable")
                super().send(to_address, subject, html_body)

        mailer = Picky()
        result = await NotificationService.dispatch_pending(store, mailer, max_attempts=3)
        assert result.data == {"sent": 1, "retried": 1, "failed": 0}
        assert [m[0] for m in mailer.sent] == ["good@example.com"]

    async def test_list_by_status(self, store):
        await NotificationService.enqueue(store, "a@example.com", "Hi", "x")
        await NotificationService.enqueue(store, "b@example.com", "Hi", "y")
        await NotificationService.dispatch_pending(
            store, RecordingMailer(fail_with=RuntimeError("nope")), max_attempts=1,
        )
        assert len(await NotificationService.list_messages(store, OutboxStatus.failed)) == 2
        assert await NotificationService.list_messages(store, OutboxStatus.queued) == []


class TestSmtpMailer:

    def test_build_message(self):
        mailer = SmtpMailer(host="mail.example.com", port=2525, username="", password="")
        msg = mailer.build_message("a@example.com", "Leave Approved", "<p>Approved</p>")
        assert msg["To"] == "a@example.com"
        assert msg["Subject"] == "Leave Approved"
        assert settings.MAIL_SENDER in msg["From"]
        html = msg.get_body(preferencelist=("html",))
        assert "<p>Approved</p>" in html.get_content()

    def test_explicit_settings_win(self):
        mailer = SmtpMailer(host="mail.example.com", port=2525, use_tls=True)
        assert (mailer.host, mailer.port, mailer.use_tls) == ("mail.example.com", 2525, True)


class TestOutboxAPI:

    async def test_non_admin_is_forbidden(self, client, org):
        response = await client.get(
            "/api/v1/notifications/outbox", headers=auth_headers_for("hr@example.com"),
        )
        assert response.status_code == 403

    async def test_admin_can_list(self, client, db, store):
        await seed_employee(store, emp_id="ADM-1", email="admin@example.com", role=UserRole.admin)
        await NotificationService.enqueue(store, "a@example.com", "Hi", "x")
        await db.commit()

        response = await client.get(
            "/api/v1/notifications/outbox?status=queued",
            headers=auth_headers_for("admin@example.com"),
        )
        assert response.status_code == 200
        assert [m["to_address"] for m in response.json()] == ["a@example.com"]
