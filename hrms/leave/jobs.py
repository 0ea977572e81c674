"""Scheduled leave jobs.

Each job is recorded in ``job_runs`` under (job, reference-zone date). The
unique constraint on that pair means a job that already ran today is
skipped, so an accidental second trigger cannot double-credit balances.
"""

from __future__ import annotations

import enum
import logging
from datetime import date, datetime, timezone
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import IntegrityError

from hrms.common.audit import record_action
from hrms.common.clock import local_today
from hrms.common.constants import AccrualStrategy, Table
from hrms.common.results import ActionResult
from hrms.config import settings
from hrms.leave.ledger import BalanceLedger
from hrms.store.service import RowRef, TabularStore

logger = logging.getLogger(__name__)


class LeaveJob(str, enum.Enum):
    accrue_pro_rata = "accrue-pro-rata"
    accrue_flat = "accrue-flat"
    carry_over = "carry-over"


_JOBS: dict[LeaveJob, Callable[[TabularStore, date], Awaitable[ActionResult]]] = {
    LeaveJob.accrue_pro_rata: lambda store, today: BalanceLedger.accrue_pro_rata(store, today),
    LeaveJob.accrue_flat: lambda store, today: BalanceLedger.accrue_flat_monthly(store, today),
    LeaveJob.carry_over: lambda store, today: BalanceLedger.apply_yearly_carry_over(store),
}

_STRATEGY_JOBS = {
    AccrualStrategy.pro_rata: LeaveJob.accrue_pro_rata,
    AccrualStrategy.flat_monthly: LeaveJob.accrue_flat,
}


def _skipped(job: LeaveJob, today: date) -> ActionResult:
    logger.info("Job %s already ran on %s; skipping", job.value, today)
    return ActionResult.ok(
        f"{job.value} already ran on {today.isoformat()}.",
        data={"job": job.value, "run_date": today, "skipped": True},
    )


async def run_job(
    store: TabularStore,
    job: LeaveJob,
    today: Optional[date] = None,
) -> ActionResult:
    """Run ``job`` once for ``today``; a repeat on the same day is a no-op."""
    today = today or local_today()
    if await store.find_one(Table.job_runs, job=job.value, run_date=today):
        return _skipped(job, today)

    # Claim the day before doing any work; a racing trigger loses on the
    # unique (job, run_date) constraint
    try:
        async with store.savepoint():
            claim = await store.append_row(Table.job_runs, {"job": job.value, "run_date": today})
    except IntegrityError:
        return _skipped(job, today)
    result = await _JOBS[job](store, today)
    await store.update_cells(
        Table.job_runs,
        RowRef.of(claim),
        {"finished_at": datetime.now(timezone.utc), "summary": result.msg},
    )
    await record_action(
        store,
        actor="System",
        action="Job Run",
        details=f"{job.value}: {result.msg}",
        meta="Job",
    )
    logger.info("Job %s on %s: %s", job.value, today, result.msg)
    return ActionResult.ok(
        result.msg,
        data={"job": job.value, "run_date": today, "skipped": False, **(result.data or {})},
    )


async def daily_accrual(store: TabularStore, today: Optional[date] = None) -> list[ActionResult]:
    """The daily trigger: yearly carry-over on 1 January (if enabled), then
    the configured accrual strategy. Only one strategy ever runs."""
    today = today or local_today()
    results: list[ActionResult] = []

    if settings.CARRY_OVER_ON_NEW_YEAR and today.month == 1 and today.day == 1:
        results.append(await run_job(store, LeaveJob.carry_over, today))

    strategy = AccrualStrategy(settings.ACCRUAL_STRATEGY)
    results.append(await run_job(store, _STRATEGY_JOBS[strategy], today))
    return results
