"""Balance ledger — accrual, carry-over and deduction of leave balances.

Balances live on the employee row (``bal_cl``, ``bal_sl``, ``bal_mat``,
``bal_pat``). Every mutation:
  - re-reads the row and writes through its ``RowRef``, so a concurrent
    writer causes ``StaleRowError`` instead of a lost update;
  - rounds the result to 2 decimal places, half-up.

Deductions are not floored at zero: an approval may overdraw a balance.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Optional

from hrms.auth.service import AccessService
from hrms.common.audit import record_action
from hrms.common.clock import local_today
from hrms.common.constants import APPROVER_ROLES, BalanceKey, EmployeeStatus, Table
from hrms.common.exceptions import NotFoundException
from hrms.common.results import ActionResult
from hrms.config import settings
from hrms.store.service import RowRef, TabularStore

if TYPE_CHECKING:
    from hrms.auth.schemas import CallerContext

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")

BALANCE_COLUMNS: dict[BalanceKey, str] = {
    BalanceKey.casual: "bal_cl",
    BalanceKey.sick: "bal_sl",
    BalanceKey.maternity: "bal_mat",
    BalanceKey.paternity: "bal_pat",
}

# Checked in this order; the first label fragment found wins
_LABEL_KEYS: tuple[tuple[str, BalanceKey], ...] = (
    ("Casual", BalanceKey.casual),
    ("Sick", BalanceKey.sick),
    ("Maternity", BalanceKey.maternity),
    ("Paternity", BalanceKey.paternity),
)


# ── Pure helpers ────────────────────────────────────────────────────

def to_decimal(value: Any) -> Decimal:
    """Parse a stored cell; blanks and junk count as zero."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def round_balance(value: Any) -> Decimal:
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def resolve_balance_key(label: Optional[str]) -> Optional[BalanceKey]:
    """Map a free-text leave type label to a balance key (case-sensitive)."""
    if not label:
        return None
    for fragment, key in _LABEL_KEYS:
        if fragment in label:
            return key
    return None


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def daily_casual_rate(year: int) -> Decimal:
    return settings.ANNUAL_CASUAL_LEAVE / Decimal(366 if is_leap_year(year) else 365)


def accrual_start(record: dict, today: date) -> Optional[date]:
    """First day not yet covered by pro-rata accrual for this employee.

    Starts at the last accrual date (or the joining date if never accrued),
    moves up to 1 January when that is in an earlier year, and moves up to
    the joining date when the employee joined later this year.
    """
    doj: Optional[date] = record.get("doj")
    start: Optional[date] = record.get("last_balance_update") or doj
    if start is None:
        return None
    if start.year < today.year:
        start = date(today.year, 1, 1)
    if doj is not None and doj.year == today.year and doj > start:
        start = doj
    return start


def is_active(record: dict) -> bool:
    return str(record.get("status") or "").strip() == EmployeeStatus.active.value


# ═════════════════════════════════════════════════════════════════════
# BalanceLedger
# ═════════════════════════════════════════════════════════════════════


class BalanceLedger:
    """Async balance mutations over the ``employees`` table."""

    @staticmethod
    async def balance_of(store: TabularStore, emp_id: str, key: BalanceKey) -> Decimal:
        record = await store.find_one(Table.employees, emp_id=emp_id)
        if record is None:
            raise NotFoundException(f"Employee {emp_id} not found")
        return round_balance(record[BALANCE_COLUMNS[key]])

    # ─────────────────────────────────────────────────────────────────
    # Accrual
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def accrue_pro_rata(store: TabularStore, today: Optional[date] = None) -> ActionResult:
        """Credit casual leave for the days elapsed since the last accrual.

        Running it twice on the same day credits nothing the second time:
        the first run moves ``last_balance_update`` to ``today``.
        """
        today = today or local_today()
        rate = daily_casual_rate(today.year)
        updated = skipped = 0

        for record in await store.read_table(Table.employees):
            if not is_active(record):
                continue
            start = accrual_start(record, today)
            if start is None:
                logger.warning(
                    "Skipping accrual for %s: no joining or last-accrual date",
                    record.get("emp_id"),
                )
                skipped += 1
                continue
            if start == today:
                continue
            elapsed = (today - start).days
            if elapsed <= 0:
                continue

            balance = round_balance(record["bal_cl"]) + elapsed * rate
            await store.update_cells(
                Table.employees,
                RowRef.of(record),
                {"bal_cl": round_balance(balance), "last_balance_update": today},
            )
            updated += 1

        logger.info("Pro-rata accrual on %s: %d updated, %d skipped", today, updated, skipped)
        return ActionResult.ok(
            "Prorated monthly leave accrued successfully.",
            data={"updated": updated, "skipped": skipped},
        )

    @staticmethod
    async def accrue_flat_monthly(
        store: TabularStore,
        today: Optional[date] = None,
    ) -> ActionResult:
        """Credit a flat amount of casual leave on the first of the month."""
        today = today or local_today()
        if today.day != 1:
            return ActionResult.ok(
                "Flat accrual only runs on the first day of the month.",
                data={"updated": 0},
            )

        amount = settings.FLAT_MONTHLY_CASUAL_ACCRUAL
        updated = 0
        for record in await store.read_table(Table.employees):
            if not is_active(record):
                continue
            await store.update_cell(
                Table.employees,
                RowRef.of(record),
                "bal_cl",
                round_balance(round_balance(record["bal_cl"]) + amount),
            )
            await record_action(
                store,
                actor="System",
                action="Leave Accrual",
                details=f"Added {amount} CL for {record['email']}",
                meta="Job",
            )
            updated += 1

        logger.info("Flat accrual on %s: %d employees credited", today, updated)
        return ActionResult.ok(
            f"Added {amount} CL to {updated} active employee(s).",
            data={"updated": updated},
        )

    @staticmethod
    async def apply_yearly_carry_over(store: TabularStore) -> ActionResult:
        """CL becomes ``CL x factor + bonus`` for every employee, active or not."""
        updated = 0
        for record in await store.read_table(Table.employees):
            balance = (
                round_balance(record["bal_cl"]) * settings.CARRY_OVER_FACTOR
                + settings.CARRY_OVER_BONUS
            )
            await store.update_cell(
                Table.employees, RowRef.of(record), "bal_cl", round_balance(balance),
            )
            updated += 1

        logger.info("Yearly carry-over applied to %d employees", updated)
        return ActionResult.ok(
            "Yearly carry-over and bonus applied.",
            data={"updated": updated},
        )

    # ─────────────────────────────────────────────────────────────────
    # Deduction / adjustment
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def deduct(
        store: TabularStore,
        emp_id: str,
        key: BalanceKey,
        days: Any,
    ) -> Decimal:
        """Subtract ``days`` from one balance and return the new balance.

        The row is re-read here so the write is checked against the latest
        version.
        """
        record = await store.find_one(Table.employees, emp_id=emp_id)
        if record is None:
            raise NotFoundException(f"Employee {emp_id} not found")
        column = BALANCE_COLUMNS[key]
        balance = round_balance(round_balance(record[column]) - to_decimal(days))
        await store.update_cell(Table.employees, RowRef.of(record), column, balance)
        return balance

    @staticmethod
    async def adjust(
        store: TabularStore,
        caller: CallerContext,
        emp_id: str,
        key: BalanceKey,
        amount: Decimal,
        reason: str,
    ) -> ActionResult:
        """ADMIN/HR manual correction of one balance (positive or negative)."""
        denied = await AccessService.require_roles(
            store, caller, APPROVER_ROLES, action="Balance Adjust",
        )
        if denied:
            return denied
        if not (reason or "").strip():
            return ActionResult.fail("A reason is required for balance adjustments.")

        record = await store.find_one(Table.employees, emp_id=emp_id)
        if record is None:
            return ActionResult.not_found("Employee not found")

        column = BALANCE_COLUMNS[key]
        old = round_balance(record[column])
        new = round_balance(old + to_decimal(amount))
        await store.update_cell(Table.employees, RowRef.of(record), column, new)
        await record_action(
            store,
            actor=caller.email,
            action="Balance Adjust",
            details=f"{emp_id} {key.value}: {old} -> {new} ({reason.strip()})",
        )
        return ActionResult.ok(
            "Balance adjusted.",
            data={"emp_id": emp_id, "key": key.value, "balance": new},
        )
