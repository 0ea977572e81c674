#!/usr/bin/env python3
"""HRMS jobs — cron entry point for provisioning, accrual and mail delivery.

Recommended crontab (reference zone Asia/Kolkata):
    5 0 * * *    python scripts/hrms_jobs.py daily
    */5 * * * *  python scripts/hrms_jobs.py dispatch-notifications

Usage:
    python scripts/hrms_jobs.py setup --admin-email admin@example.com [--create-tables]
    python scripts/hrms_jobs.py daily                      # carry-over (1 Jan) + configured accrual
    python scripts/hrms_jobs.py accrue-pro-rata [--date 2025-03-01]
    python scripts/hrms_jobs.py accrue-flat [--date 2025-03-01]
    python scripts/hrms_jobs.py carry-over [--date 2025-01-01]
    python scripts/hrms_jobs.py dispatch-notifications
    python scripts/hrms_jobs.py issue-token user@example.com [--hours 8]

Every job command runs in one transaction. Accrual jobs are recorded in
``job_runs`` and are skipped if they already ran for the given date.

Exit codes:
    0 = success
    1 = the operation reported a failure
    2 = configuration problem (no database)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

# ── Path setup ────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

# Settings are read at import time, so .env must be loaded first
load_dotenv(PROJECT_ROOT / ".env")

from hrms.admin.service import AdminService  # noqa: E402
from hrms.auth.service import create_access_token  # noqa: E402
from hrms.common.results import ActionResult  # noqa: E402
from hrms.database import Base, async_session_factory, engine  # noqa: E402
from hrms.leave.jobs import LeaveJob, daily_accrual, run_job  # noqa: E402
from hrms.notifications.service import NotificationService  # noqa: E402
from hrms.store.service import TabularStore  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("hrms_jobs")


# ══════════════════════════════════════════════════════════════════════
# Commands
# ══════════════════════════════════════════════════════════════════════


async def _in_transaction(work) -> list[ActionResult]:
    """Run ``work(store)`` in one session; commit on success, roll back on error."""
    async with async_session_factory() as session:
        store = TabularStore(session)
        try:
            results = await work(store)
            await session.commit()
        except Exception:
            await session.rollback()
            raise
    return results if isinstance(results, list) else [results]


async def _run(coro):
    try:
        return await coro
    finally:
        await engine.dispose()


async def cmd_setup(admin_email: str, create_tables: bool) -> list[ActionResult]:
    if create_tables:
        import hrms.models  # noqa: F401  (registers every table on Base.metadata)

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Tables created")
    return await _in_transaction(lambda store: AdminService.setup_system(store, admin_email))


async def cmd_job(job: Optional[LeaveJob], today: Optional[date]) -> list[ActionResult]:
    if job is None:
        return await _in_transaction(lambda store: daily_accrual(store, today))
    return await _in_transaction(lambda store: run_job(store, job, today))


async def cmd_dispatch() -> list[ActionResult]:
    return await _in_transaction(NotificationService.dispatch_pending)


# ══════════════════════════════════════════════════════════════════════
# Main
# ══════════════════════════════════════════════════════════════════════


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="HRMS jobs — provisioning, leave accrual, notification delivery",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Seed the super admin, holidays and templates")
    setup.add_argument("--admin-email", required=True)
    setup.add_argument("--create-tables", action="store_true",
                       help="Create missing tables first (development only; use alembic otherwise)")

    sub.add_parser("daily", help="Carry-over on 1 January, then the configured accrual")
    for job in LeaveJob:
        p = sub.add_parser(job.value, help=f"Run the {job.value} job once")
        p.add_argument("--date", type=date.fromisoformat, default=None,
                       help="Run as of this date (YYYY-MM-DD, default: today)")

    sub.add_parser("dispatch-notifications", help="Deliver queued e-mails")

    token = sub.add_parser("issue-token", help="Print a bearer token for an e-mail")
    token.add_argument("email")
    token.add_argument("--hours", type=int, default=None)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "issue-token":
        token, expires_in = create_access_token(args.email, args.hours)
        print(token)
        logger.info("Token for %s expires in %d seconds", args.email, expires_in)
        return 0

    if async_session_factory is None:
        logger.error("DATABASE_URL is empty; set it in %s", PROJECT_ROOT / ".env")
        return 2

    if args.command == "setup":
        coro = cmd_setup(args.admin_email, args.create_tables)
    elif args.command == "daily":
        coro = cmd_job(None, None)
    elif args.command == "dispatch-notifications":
        coro = cmd_dispatch()
    else:
        coro = cmd_job(LeaveJob(args.command), args.date)

    results = asyncio.run(_run(coro))
    for result in results:
        level = logging.INFO if result.success else logging.ERROR
        logger.log(level, "%s: %s", args.command, result.msg)
    return 0 if all(r.success for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
