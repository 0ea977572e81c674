"""Tests for the scheduled leave jobs and their once-per-day ledger."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from hrms.common.constants import AccrualStrategy, Table
from hrms.config import settings
from hrms.leave.jobs import LeaveJob, daily_accrual, run_job
from tests.conftest import seed_employee


class TestRunJob:

    async def test_records_run_and_audits(self, store):
        await seed_employee(store, bal_cl=Decimal("10"))
        result = await run_job(store, LeaveJob.carry_over, date(2025, 1, 1))
        assert result.success
        assert result.data["skipped"] is False
        assert result.data["updated"] == 1

        runs = await store.read_table(Table.job_runs)
        assert len(runs) == 1
        assert runs[0]["job"] == "carry-over"
        assert runs[0]["run_date"] == date(2025, 1, 1)
        assert runs[0]["finished_at"] is not None
        assert runs[0]["summary"] == "Yearly carry-over and bonus applied."
        assert await store.read_table(Table.system_logs, action="Job Run")

    async def test_second_trigger_same_day_is_skipped(self, store):
        await seed_employee(store, bal_cl=Decimal("10"))
        await run_job(store, LeaveJob.carry_over, date(2025, 1, 1))
        result = await run_job(store, LeaveJob.carry_over, date(2025, 1, 1))
        assert result.success
        assert result.data["skipped"] is True
        record = await store.find_one(Table.employees, emp_id="EMP-001")
        assert record["bal_cl"] == Decimal("6")

    async def test_losing_a_concurrent_claim_is_skipped(self, store, monkeypatch):
        await seed_employee(store, bal_cl=Decimal("10"))
        # Another trigger claims the day between our check and our insert
        await store.append_row(Table.job_runs, {"job": "carry-over", "run_date": date(2025, 1, 1)})
        real_find_one = store.find_one

        async def find_one(table, **equals):
            if table == Table.job_runs:
                return None
            return await real_find_one(table, **equals)

        monkeypatch.setattr(store, "find_one", find_one)
        result = await run_job(store, LeaveJob.carry_over, date(2025, 1, 1))
        monkeypatch.undo()

        assert result.success
        assert result.data["skipped"] is True
        record = await store.find_one(Table.employees, emp_id="EMP-001")
        assert record["bal_cl"] == Decimal("10")
        assert len(await store.read_table(Table.job_runs)) == 1
        assert await store.read_table(Table.system_logs, action="Job Run") == []

    async def test_same_job_runs_again_next_day(self, store):
        await seed_employee(store, bal_cl=Decimal("0"), doj=date(2025, 1, 1))
        await run_job(store, LeaveJob.accrue_pro_rata, date(2025, 1, 11))
        await run_job(store, LeaveJob.accrue_pro_rata, date(2025, 1, 12))
        assert len(await store.read_table(Table.job_runs, job="accrue-pro-rata")) == 2


class TestDailyAccrual:

    async def test_runs_only_configured_strategy(self, store, monkeypatch):
        monkeypatch.setattr(settings, "ACCRUAL_STRATEGY", AccrualStrategy.flat_monthly.value)
        monkeypatch.setattr(settings, "CARRY_OVER_ON_NEW_YEAR", False)
        await seed_employee(store, bal_cl=Decimal("2"))

        results = await daily_accrual(store, date(2025, 3, 1))
        assert [r.data["job"] for r in results] == ["accrue-flat"]
        record = await store.find_one(Table.employees, emp_id="EMP-001")
        assert record["bal_cl"] == Decimal("3.5")

    async def test_new_year_runs_carry_over_first(self, store, monkeypatch):
        monkeypatch.setattr(settings, "ACCRUAL_STRATEGY", AccrualStrategy.flat_monthly.value)
        monkeypatch.setattr(settings, "CARRY_OVER_ON_NEW_YEAR", True)
        await seed_employee(store, bal_cl=Decimal("10"))

        results = await daily_accrual(store, date(2025, 1, 1))
        assert [r.data["job"] for r in results] == ["carry-over", "accrue-flat"]
        record = await store.find_one(Table.employees, emp_id="EMP-001")
        # 10 x 0.5 + 1, then + 1.5
        assert record["bal_cl"] == Decimal("7.5")

    async def test_repeat_trigger_is_idempotent(self, store, monkeypatch):
        monkeypatch.setattr(settings, "ACCRUAL_STRATEGY", AccrualStrategy.pro_rata.value)
        monkeypatch.setattr(settings, "CARRY_OVER_ON_NEW_YEAR", False)
        await seed_employee(
            store, bal_cl=Decimal("0"), doj=date(2024, 6, 1), last_balance_update=date(2024, 12, 31),
        )
        await daily_accrual(store, date(2025, 1, 31))
        results = await daily_accrual(store, date(2025, 1, 31))
        assert results[0].data["skipped"] is True
        record = await store.find_one(Table.employees, emp_id="EMP-001")
        assert record["bal_cl"] == Decimal("1.48")
