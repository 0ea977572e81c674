"""Notification service — outbox writes, delivery, and leave/announcement messages.

Workflows never talk to SMTP directly. They ``enqueue`` a row in
``notification_outbox`` inside their own unit of work; a separate
``dispatch_pending`` run delivers queued rows and records the outcome.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from html import escape
from typing import Any, Iterable, Mapping, Optional

from hrms.common.constants import OutboxStatus, Table
from hrms.common.results import ActionResult
from hrms.config import settings
from hrms.notifications.mailer import Mailer, SmtpMailer
from hrms.store.service import Record, RowRef, TabularStore

logger = logging.getLogger(__name__)


# ── Core service ────────────────────────────────────────────────────


class NotificationService:
    """Async outbox operations."""

    @staticmethod
    async def enqueue(
        store: TabularStore,
        to_address: str,
        subject: str,
        html_body: str,
    ) -> Record:
        """Queue one e-mail for delivery."""
        to_address = (to_address or "").strip()
        if not to_address:
            raise ValueError("Notification has no recipient address")
        return await store.append_row(
            Table.notification_outbox,
            {
                "to_address": to_address,
                "subject": subject,
                "html_body": html_body,
                "status": OutboxStatus.queued.value,
                "attempts": 0,
                "created_at": datetime.now(timezone.utc),
            },
        )

    @staticmethod
    async def list_messages(
        store: TabularStore,
        status: Optional[OutboxStatus] = None,
    ) -> list[Record]:
        if status is None:
            return await store.read_table(Table.notification_outbox)
        return await store.read_table(Table.notification_outbox, status=status.value)

    @staticmethod
    async def dispatch_pending(
        store: TabularStore,
        mailer: Optional[Mailer] = None,
        max_attempts: Optional[int] = None,
    ) -> ActionResult:
        """Try to deliver every queued message once.

        A failed delivery stays queued until it has been attempted
        ``max_attempts`` times, then it is marked failed.
        """
        mailer = mailer or SmtpMailer()
        max_attempts = max_attempts or settings.NOTIFICATION_MAX_ATTEMPTS
        sent = retried = failed = 0

        for row in await store.read_table(
            Table.notification_outbox, status=OutboxStatus.queued.value,
        ):
            attempts = (row.get("attempts") or 0) + 1
            try:
                await asyncio.to_thread(
                    mailer.send, row["to_address"], row["subject"], row["html_body"],
                )
            except Exception as exc:
                logger.warning(
                    "Delivery to %s failed (attempt %d/%d): %s",
                    row["to_address"], attempts, max_attempts, exc,
                )
                gave_up = attempts >= max_attempts
                await store.update_cells(
                    Table.notification_outbox,
                    RowRef.of(row),
                    {
                        "attempts": attempts,
                        "last_error": str(exc)[:1000],
                        "status": (OutboxStatus.failed if gave_up else OutboxStatus.queued).value,
                    },
                )
                if gave_up:
                    failed += 1
                else:
                    retried += 1
                continue

            await store.update_cells(
                Table.notification_outbox,
                RowRef.of(row),
                {
                    "attempts": attempts,
                    "status": OutboxStatus.sent.value,
                    "sent_at": datetime.now(timezone.utc),
                    "last_error": None,
                },
            )
            sent += 1

        logger.info("Outbox dispatch: %d sent, %d to retry, %d failed", sent, retried, failed)
        return ActionResult.ok(
            f"{sent} sent, {retried} queued for retry, {failed} failed.",
            data={"sent": sent, "retried": retried, "failed": failed},
        )


# ── Message builders ────────────────────────────────────────────────
# Each builder only enqueues; callers decide how to treat a failure.


def _portal_link(page: str) -> str:
    return f'<p><a href="{escape(settings.APP_URL)}?page={page}">Open HRMS Portal</a></p>'


def _leave_details(request: Mapping[str, Any]) -> str:
    return (
        "<ul>"
        f"<li><b>Leave Type:</b> {escape(str(request['leave_type']))}</li>"
        f"<li><b>Dates:</b> {request['start_date']} to {request['end_date']}</li>"
        f"<li><b>Days:</b> {request['days']}</li>"
        f"<li><b>Reason:</b> {escape(request.get('reason') or 'N/A')}</li>"
        "</ul>"
    )


async def notify_leave_submitted(
    store: TabularStore,
    employee: Any,  # hrms.auth.schemas.CallerContext
    manager: Optional[Mapping[str, Any]],
    request: Mapping[str, Any],
) -> int:
    """Tell the manager (if any) and the employee about a new request."""
    queued = 0
    details = _leave_details(request)
    if manager and manager.get("email"):
        await NotificationService.enqueue(
            store,
            manager["email"],
            f"Leave Application from {employee.name}",
            f"<p>Hi {escape(manager.get('name') or '')},</p>"
            f"<p>{escape(employee.name)} has applied for leave. "
            "Please review the details below:</p>"
            f"{details}"
            "<p>You can approve or reject this leave from the HRMS portal:</p>"
            f"{_portal_link('leaves')}"
            "<p>Thanks,<br>HRMS</p>",
        )
        queued += 1

    await NotificationService.enqueue(
        store,
        employee.email,
        "Your Leave Application has been submitted",
        f"<p>Hi {escape(employee.name)},</p>"
        "<p>Your leave application has been submitted and is pending approval. "
        "Here are the details:</p>"
        f"{details}"
        "<p>You can view the status of your application in the HRMS portal:</p>"
        f"{_portal_link('leaves')}"
        "<p>Thanks,<br>HRMS</p>",
    )
    return queued + 1


async def notify_leave_decided(
    store: TabularStore,
    approver: Any,  # hrms.auth.schemas.CallerContext
    requester: Mapping[str, Any],
    request: Mapping[str, Any],
    *,
    approved: bool,
    note: Optional[str] = None,
) -> int:
    """Tell the requester their request was approved or rejected."""
    if not requester.get("email"):
        return 0
    verdict = "Approved" if approved else "Rejected"
    body = (
        f"<p>{escape(approver.name or approver.email)} has {verdict.lower()} "
        f"your leave request ({escape(request['request_id'])}).</p>"
        f"{_leave_details(request)}"
    )
    if note:
        body += f"<p><b>Note:</b> {escape(note)}</p>"
    await NotificationService.enqueue(
        store,
        requester["email"],
        f"Leave {verdict}: {request['request_id']}",
        body,
    )
    return 1


async def notify_announcement(
    store: TabularStore,
    recipients: Iterable[Mapping[str, Any]],
    title: str,
    message: str,
    posted_by: str,
) -> int:
    """Queue an announcement for every recipient that has an e-mail."""
    body = (
        f"<p>Hi,</p><p>{escape(message)}</p>"
        f"<p>Posted by: {escape(posted_by)}</p>"
    )
    queued = 0
    for recipient in recipients:
        if recipient.get("email"):
            await NotificationService.enqueue(
                store, recipient["email"], f"Announcement: {title}", body,
            )
            queued += 1
    return queued
