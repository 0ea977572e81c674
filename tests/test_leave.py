"""Leave module test suite — submission, pending reservations, approval and
rejection, decision authority, notifications, and API endpoints.

Tests run against SQLite via the shared conftest.py fixtures.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import sqlalchemy as sa

from hrms.common.constants import FailureKind, LeaveSession, LeaveStatus, Table, UserRole
from hrms.leave.schemas import LeaveApplyRequest
from hrms.leave.service import LeaveService
from tests.conftest import auth_headers_for, caller_of, seed_employee


def _form(
    start: date = date(2025, 1, 6),
    end: date = date(2025, 1, 7),
    leave_type: str = "Casual Leave",
    session: LeaveSession = LeaveSession.full_day,
) -> LeaveApplyRequest:
    return LeaveApplyRequest(
        leave_type=leave_type, start_date=start, end_date=end, session=session, reason="Family",
    )


async def _balance(store, emp_id: str, column: str = "bal_cl") -> Decimal:
    record = await store.find_one(Table.employees, emp_id=emp_id)
    return record[column]


# ═════════════════════════════════════════════════════════════════════
# SUBMISSION
# ═════════════════════════════════════════════════════════════════════


class TestSubmit:

    async def test_submit_creates_pending_request(self, store, org):
        result = await LeaveService.submit(store, caller_of(org["employee"]), _form())
        assert result.success
        assert result.msg == "Leave Applied successfully"
        request = result.data
        assert request["request_id"].startswith("LR-")
        assert request["status"] == LeaveStatus.pending.value
        assert request["days"] == Decimal("2")
        assert request["session"] == "Full Day"
        logs = await store.read_table(Table.system_logs, action="Leave Apply")
        assert logs[0]["details"] == "2 days Casual Leave"

    async def test_zero_working_days_is_rejected(self, store, org):
        # Sat 4 (1st Saturday) and Sun 5
        result = await LeaveService.submit(
            store, caller_of(org["employee"]), _form(date(2025, 1, 4), date(2025, 1, 5)),
        )
        assert not result.success
        assert result.msg == "Invalid Dates or 0 leave days."
        assert await store.read_table(Table.leave_requests) == []

    async def test_end_before_start_is_rejected(self, store, org):
        result = await LeaveService.submit(
            store, caller_of(org["employee"]), _form(date(2025, 1, 7), date(2025, 1, 6)),
        )
        assert not result.success
        assert result.msg == "Invalid Dates or 0 leave days."

    async def test_half_day_counts_half(self, store, org):
        result = await LeaveService.submit(
            store, caller_of(org["employee"]),
            _form(date(2025, 1, 6), date(2025, 1, 6), session=LeaveSession.first_half),
        )
        assert result.success
        assert result.data["days"] == Decimal("0.5")

    async def test_insufficient_balance(self, store, org):
        # Employee has 3 CL; Jan 6-10 is 5 working days
        result = await LeaveService.submit(
            store, caller_of(org["employee"]), _form(date(2025, 1, 6), date(2025, 1, 10)),
        )
        assert not result.success
        assert result.error == FailureKind.validation
        assert result.msg == (
            "Insufficient Balance! Available: 3, Requested: 5 (includes 0 pending days)"
        )

    async def test_pending_requests_reserve_balance(self, store, org):
        caller = caller_of(org["employee"])
        first = await LeaveService.submit(store, caller, _form(date(2025, 1, 6), date(2025, 1, 7)))
        assert first.success

        second = await LeaveService.submit(store, caller, _form(date(2025, 1, 8), date(2025, 1, 9)))
        assert not second.success
        assert second.msg == (
            "Insufficient Balance! Available: 1, Requested: 2 (includes 2 pending days)"
        )
        assert len(await store.read_table(Table.leave_requests)) == 1

    async def test_pending_reservation_is_per_exact_label(self, store, org):
        caller = caller_of(org["employee"])
        await LeaveService.submit(store, caller, _form(date(2025, 1, 6), date(2025, 1, 7)))
        # Sick balance is untouched by pending casual leave
        result = await LeaveService.submit(
            store, caller, _form(date(2025, 1, 8), date(2025, 1, 9), leave_type="Sick Leave"),
        )
        assert result.success

    async def test_unmapped_label_skips_balance_check(self, store, org):
        result = await LeaveService.submit(
            store, caller_of(org["employee"]),
            _form(date(2025, 1, 6), date(2025, 1, 10), leave_type="Work From Home"),
        )
        assert result.success
        assert result.data["days"] == Decimal("5")

    async def test_submit_queues_mail_for_manager_and_employee(self, store, org):
        await LeaveService.submit(store, caller_of(org["employee"]), _form())
        outbox = await store.read_table(Table.notification_outbox)
        recipients = sorted(m["to_address"] for m in outbox)
        assert recipients == ["employee@example.com", "manager@example.com"]
        subjects = {m["subject"] for m in outbox}
        assert "Leave Application from Esha Employee" in subjects
        assert "Your Leave Application has been submitted" in subjects

    async def test_holiday_is_not_counted(self, store, org):
        await store.append_row(Table.holidays, [date(2025, 1, 7), "Company Day"])
        result = await LeaveService.submit(store, caller_of(org["employee"]), _form())
        assert result.data["days"] == Decimal("1")


# ═════════════════════════════════════════════════════════════════════
# APPROVAL / REJECTION
# ═════════════════════════════════════════════════════════════════════


class TestDecide:

    async def _submit(self, store, org, **kwargs) -> str:
        result = await LeaveService.submit(store, caller_of(org["employee"]), _form(**kwargs))
        assert result.success
        return result.data["request_id"]

    async def test_manager_approves_and_balance_is_deducted(self, store, org):
        request_id = await self._submit(store, org)
        result = await LeaveService.approve(store, caller_of(org["manager"]), request_id)
        assert result.success
        assert result.msg == "Leave Approved & Balance Deducted"

        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.approved.value
        assert request["decided_by"] == "manager@example.com"
        assert await _balance(store, "EMP-001") == Decimal("1")
        logs = await store.read_table(Table.system_logs, action="Leave Approve")
        assert logs[0]["details"] == f"Approved {request_id} by manager@example.com"

    async def test_hr_may_approve_anyone(self, store, org):
        request_id = await self._submit(store, org)
        result = await LeaveService.approve(store, caller_of(org["hr"]), request_id)
        assert result.success

    async def test_second_approval_is_refused_and_deducts_once(self, store, org):
        request_id = await self._submit(store, org)
        await LeaveService.approve(store, caller_of(org["manager"]), request_id)
        again = await LeaveService.approve(store, caller_of(org["hr"]), request_id)
        assert not again.success
        assert again.msg == "Already processed"
        assert again.error == FailureKind.conflict
        assert await _balance(store, "EMP-001") == Decimal("1")

    async def test_non_manager_is_denied_and_audited(self, store, org):
        request_id = await self._submit(store, org)
        result = await LeaveService.approve(store, caller_of(org["outsider"]), request_id)
        assert not result.success
        assert result.error == FailureKind.authorization
        assert result.msg == "You are not authorized to approve this request."
        failures = await store.read_table(Table.system_logs, action="Leave Approve Failed")
        assert len(failures) == 1
        assert await _balance(store, "EMP-001") == Decimal("3")

    async def test_peer_cannot_reject(self, store, org):
        request_id = await self._submit(store, org)
        result = await LeaveService.reject(store, caller_of(org["peer"]), request_id)
        assert result.msg == "You are not authorized to reject this request."
        assert await store.read_table(Table.system_logs, action="Leave Reject Failed")

    async def test_unknown_request(self, store, org):
        result = await LeaveService.approve(store, caller_of(org["hr"]), "LR-404")
        assert not result.success
        assert result.error == FailureKind.not_found
        assert result.msg == "Request not found"

    async def test_approval_may_overdraw(self, store, org):
        caller = caller_of(org["employee"])
        # Different labels that both map to CL reserve separately
        a = await LeaveService.submit(
            store, caller, _form(date(2025, 1, 6), date(2025, 1, 8), leave_type="Casual Leave"),
        )
        b = await LeaveService.submit(
            store, caller, _form(date(2025, 1, 9), date(2025, 1, 10), leave_type="Casual Leave (Urgent)"),
        )
        assert a.success and b.success
        hr = caller_of(org["hr"])
        await LeaveService.approve(store, hr, a.data["request_id"])
        await LeaveService.approve(store, hr, b.data["request_id"])
        assert await _balance(store, "EMP-001") == Decimal("-2")

    async def test_reject_keeps_balance_and_stores_note(self, store, org):
        request_id = await self._submit(store, org)
        result = await LeaveService.reject(
            store, caller_of(org["manager"]), request_id, "Release week",
        )
        assert result.success
        assert result.msg == "Leave Rejected"
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.rejected.value
        assert request["decision_note"] == "Release week"
        assert await _balance(store, "EMP-001") == Decimal("3")

    async def test_rejected_request_frees_reservation(self, store, org):
        request_id = await self._submit(store, org)
        await LeaveService.reject(store, caller_of(org["manager"]), request_id)
        again = await LeaveService.submit(
            store, caller_of(org["employee"]), _form(date(2025, 1, 8), date(2025, 1, 10)),
        )
        assert again.success

    async def test_decision_queues_mail_for_requester(self, store, org):
        request_id = await self._submit(store, org)
        await LeaveService.approve(store, caller_of(org["manager"]), request_id)
        subjects = [m["subject"] for m in await store.read_table(Table.notification_outbox)]
        assert f"Leave Approved: {request_id}" in subjects

    async def _orphan(self, store) -> str:
        await store.append_row(
            Table.leave_requests,
            {
                "request_id": "LR-ORPHAN",
                "emp_id": "EMP-GONE",
                "name": "Gone Employee",
                "leave_type": "Casual Leave",
                "start_date": date(2025, 1, 6),
                "end_date": date(2025, 1, 6),
                "days": 1,
                "status": LeaveStatus.pending.value,
            },
        )
        return "LR-ORPHAN"

    async def test_hr_approves_request_of_removed_employee(self, store, org):
        request_id = await self._orphan(store)
        result = await LeaveService.approve(store, caller_of(org["hr"]), request_id)
        assert result.success

        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.approved.value
        assert request["decided_by"] == "hr@example.com"
        assert await store.read_table(Table.notification_outbox) == []
        assert await _balance(store, "EMP-001") == Decimal("3")

    async def test_hr_rejects_request_of_removed_employee(self, store, org):
        request_id = await self._orphan(store)
        result = await LeaveService.reject(store, caller_of(org["hr"]), request_id, "Left")
        assert result.msg == "Leave Rejected"
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.rejected.value

    async def test_manager_cannot_decide_request_of_removed_employee(self, store, org):
        request_id = await self._orphan(store)
        result = await LeaveService.approve(store, caller_of(org["manager"]), request_id)
        assert result.error == FailureKind.authorization
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.pending.value


# ═════════════════════════════════════════════════════════════════════
# NOTIFICATION FAILURES
# ═════════════════════════════════════════════════════════════════════


async def _mail_down(*args, **kwargs):
    raise RuntimeError("SMTP relay unreachable")


async def _broken_outbox(store, *args, **kwargs):
    # Raises sqlalchemy.exc.OperationalError, a DBAPIError
    await store.session.execute(sa.text("SELECT * FROM missing_outbox"))


class TestNotificationFailure:

    async def _one_day(self, store, org) -> str:
        result = await LeaveService.submit(
            store, caller_of(org["employee"]), _form(date(2025, 1, 6), date(2025, 1, 6)),
        )
        assert result.success
        return result.data["request_id"]

    async def test_submit_survives_mail_error(self, store, org, monkeypatch):
        monkeypatch.setattr("hrms.leave.service.notify_leave_submitted", _mail_down)
        request_id = await self._one_day(store, org)
        await store.commit()

        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.pending.value
        failures = await store.read_table(Table.system_logs, action="Email Failed")
        assert len(failures) == 1
        assert "SMTP relay unreachable" in failures[0]["details"]

    async def test_submit_survives_database_error(self, store, org, monkeypatch):
        monkeypatch.setattr("hrms.leave.service.notify_leave_submitted", _broken_outbox)
        request_id = await self._one_day(store, org)
        await store.commit()

        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.pending.value
        assert await store.read_table(Table.system_logs, action="Leave Apply")
        assert len(await store.read_table(Table.system_logs, action="Email Failed")) == 1

    async def test_approve_survives_mail_error(self, store, org, monkeypatch):
        request_id = await self._one_day(store, org)
        monkeypatch.setattr("hrms.leave.service.notify_leave_decided", _mail_down)
        result = await LeaveService.approve(store, caller_of(org["manager"]), request_id)
        await store.commit()

        assert result.success
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.approved.value
        assert await _balance(store, "EMP-001") == Decimal("2")
        assert len(await store.read_table(Table.system_logs, action="Email Failed")) == 1

    async def test_approve_survives_database_error(self, store, org, monkeypatch):
        request_id = await self._one_day(store, org)
        monkeypatch.setattr("hrms.leave.service.notify_leave_decided", _broken_outbox)
        result = await LeaveService.approve(store, caller_of(org["hr"]), request_id)
        await store.commit()

        assert result.success
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.approved.value
        assert await _balance(store, "EMP-001") == Decimal("2")
        assert len(await store.read_table(Table.system_logs, action="Leave Approve")) == 1
        assert len(await store.read_table(Table.system_logs, action="Email Failed")) == 1

    async def test_reject_survives_mail_error(self, store, org, monkeypatch):
        request_id = await self._one_day(store, org)
        monkeypatch.setattr("hrms.leave.service.notify_leave_decided", _mail_down)
        result = await LeaveService.reject(store, caller_of(org["manager"]), request_id, "No")
        await store.commit()

        assert result.msg == "Leave Rejected"
        request = await store.find_one(Table.leave_requests, request_id=request_id)
        assert request["status"] == LeaveStatus.rejected.value
        assert await _balance(store, "EMP-001") == Decimal("3")
        assert len(await store.read_table(Table.system_logs, action="Email Failed")) == 1


# ═════════════════════════════════════════════════════════════════════
# QUERIES
# ═════════════════════════════════════════════════════════════════════


class TestLeaveData:

    async def test_manager_sees_direct_reports_pending(self, store, org):
        await LeaveService.submit(store, caller_of(org["employee"]), _form())
        await LeaveService.submit(store, caller_of(org["outsider"]), _form())

        data = await LeaveService.get_leave_data(store, caller_of(org["manager"]))
        assert data["my_leaves"] == []
        assert [r["emp_id"] for r in data["team_leaves"]] == ["EMP-001"]

    async def test_hr_sees_all_pending(self, store, org):
        await LeaveService.submit(store, caller_of(org["employee"]), _form())
        await LeaveService.submit(store, caller_of(org["outsider"]), _form())
        data = await LeaveService.get_leave_data(store, caller_of(org["hr"]))
        assert len(data["team_leaves"]) == 2

    async def test_preview(self, store):
        count = await LeaveService.preview(store, date(2025, 1, 1), date(2025, 1, 7))
        assert count.days == 5
        assert count.excluded_count == 2


# ═════════════════════════════════════════════════════════════════════
# API ENDPOINTS
# ═════════════════════════════════════════════════════════════════════


class TestLeaveAPI:

    async def test_apply_and_approve_over_http(self, client, org):
        response = await client.post(
            "/api/v1/leave/apply",
            json={"leave_type": "Casual Leave", "start_date": "2025-01-06", "end_date": "2025-01-07"},
            headers=auth_headers_for("employee@example.com"),
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        request_id = body["data"]["request_id"]

        response = await client.put(
            f"/api/v1/leave/{request_id}/approve",
            headers=auth_headers_for("manager@example.com"),
        )
        assert response.status_code == 200
        assert response.json()["msg"] == "Leave Approved & Balance Deducted"

        response = await client.get(
            "/api/v1/leave/balance", headers=auth_headers_for("employee@example.com"),
        )
        assert Decimal(response.json()["casual"]) == Decimal("1")

    async def test_insufficient_balance_is_422(self, client, org):
        response = await client.post(
            "/api/v1/leave/apply",
            json={"leave_type": "Casual Leave", "start_date": "2025-01-06", "end_date": "2025-01-10"},
            headers=auth_headers_for("employee@example.com"),
        )
        assert response.status_code == 422
        assert response.json()["detail"].startswith("Insufficient Balance!")

    async def test_unauthorized_approval_is_403_and_audit_survives(self, client, org, read_logs):
        response = await client.post(
            "/api/v1/leave/apply",
            json={"leave_type": "Casual Leave", "start_date": "2025-01-06", "end_date": "2025-01-06"},
            headers=auth_headers_for("employee@example.com"),
        )
        request_id = response.json()["data"]["request_id"]

        response = await client.put(
            f"/api/v1/leave/{request_id}/approve",
            headers=auth_headers_for("outsider@example.com"),
        )
        assert response.status_code == 403
        assert response.headers["content-type"].startswith("application/problem+json")
        assert len(await read_logs("Leave Approve Failed")) == 1

    async def test_double_approval_is_409(self, client, org):
        response = await client.post(
            "/api/v1/leave/apply",
            json={"leave_type": "Casual Leave", "start_date": "2025-01-06", "end_date": "2025-01-06"},
            headers=auth_headers_for("employee@example.com"),
        )
        request_id = response.json()["data"]["request_id"]
        hr = auth_headers_for("hr@example.com")
        assert (await client.put(f"/api/v1/leave/{request_id}/approve", headers=hr)).status_code == 200
        response = await client.put(f"/api/v1/leave/{request_id}/approve", headers=hr)
        assert response.status_code == 409
        assert response.json()["detail"] == "Already processed"

    async def test_preview_endpoint(self, client, org):
        response = await client.get(
            "/api/v1/leave/preview",
            params={"start_date": "2025-01-01", "end_date": "2025-01-07"},
            headers=auth_headers_for("employee@example.com"),
        )
        assert response.status_code == 200
        assert response.json() == {
            "days": 5,
            "excluded_count": 2,
            "excluded_dates": ["2025-01-04", "2025-01-05"],
        }

    async def test_leave_data_endpoint(self, client, org):
        await client.post(
            "/api/v1/leave/apply",
            json={"leave_type": "Casual Leave", "start_date": "2025-01-06", "end_date": "2025-01-06"},
            headers=auth_headers_for("employee@example.com"),
        )
        response = await client.get("/api/v1/leave", headers=auth_headers_for("manager@example.com"))
        assert response.status_code == 200
        assert len(response.json()["team_leaves"]) == 1

    async def test_jobs_endpoint_requires_admin(self, client, org, read_logs):
        response = await client.post(
            "/api/v1/leave/jobs/carry-over", headers=auth_headers_for("hr@example.com"),
        )
        assert response.status_code == 403
        assert len(await read_logs("Job Run Failed")) == 1

    async def test_jobs_endpoint_reports_run_then_skip(self, client, db, store, org):
        await seed_employee(store, emp_id="ADM-1", email="admin@example.com", role=UserRole.admin)
        await db.commit()
        headers = auth_headers_for("admin@example.com")

        first = await client.post("/api/v1/leave/jobs/carry-over", headers=headers)
        assert first.status_code == 200
        body = first.json()
        assert set(body) == {"job", "run_date", "skipped", "msg"}
        assert body["job"] == "carry-over"
        assert body["skipped"] is False
        assert body["msg"] == "Yearly carry-over and bonus applied."

        second = await client.post("/api/v1/leave/jobs/carry-over", headers=headers)
        assert second.json()["skipped"] is True
        assert second.json()["run_date"] == body["run_date"]
