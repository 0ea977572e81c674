"""Enums and constants for HRMS — values match what is stored in the tables."""

from __future__ import annotations

import enum


# ── Tables ──────────────────────────────────────────────────────────

class Table(str, enum.Enum):
    employees = "employees"
    leave_requests = "leave_requests"
    holidays = "holidays"
    system_logs = "system_logs"
    attendance = "attendance"
    announcements = "announcements"
    assets = "assets"
    payslips = "payslips"
    documents = "documents"
    document_templates = "document_templates"
    generated_documents = "generated_documents"
    app_settings = "app_settings"
    notification_outbox = "notification_outbox"
    job_runs = "job_runs"


# ── Employee / Core HR ──────────────────────────────────────────────

class UserRole(str, enum.Enum):
    admin = "ADMIN"
    hr = "HR"
    accountant = "ACCOUNTANT"
    manager = "MANAGER"
    employee = "EMPLOYEE"


class EmployeeStatus(str, enum.Enum):
    active = "Active"
    inactive = "Inactive"


# ── Leave ───────────────────────────────────────────────────────────

class LeaveStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


class LeaveSession(str, enum.Enum):
    full_day = "Full Day"
    first_half = "First Half"
    second_half = "Second Half"


class BalanceKey(str, enum.Enum):
    casual = "CL"
    sick = "SL"
    maternity = "Maternity"
    paternity = "Paternity"


class AccrualStrategy(str, enum.Enum):
    pro_rata = "pro_rata"
    flat_monthly = "flat_monthly"


# ── Attendance ──────────────────────────────────────────────────────

class PunchType(str, enum.Enum):
    check_in = "CheckIn"
    check_out = "CheckOut"


# ── Assets / documents ──────────────────────────────────────────────

class AssetStatus(str, enum.Enum):
    available = "Available"
    assigned = "Assigned"


class ApprovalStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"


# ── Notifications ───────────────────────────────────────────────────

class OutboxStatus(str, enum.Enum):
    queued = "queued"
    sent = "sent"
    failed = "failed"


# ── Results ─────────────────────────────────────────────────────────

class FailureKind(str, enum.Enum):
    validation = "validation"
    authorization = "authorization"
    not_found = "not_found"
    conflict = "conflict"


# ── Role groups ─────────────────────────────────────────────────────

APPROVER_ROLES: frozenset[UserRole] = frozenset({UserRole.admin, UserRole.hr})
RECORD_VIEWER_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.admin, UserRole.hr, UserRole.accountant}
)

# ── Misc constants ──────────────────────────────────────────────────

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
SUPER_ADMIN_ID = "WV-ADMIN"
