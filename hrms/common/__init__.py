"""Common module — shared utilities for HRMS."""

from hrms.common.constants import (
    APPROVER_ROLES,
    DATE_FORMAT,
    RECORD_VIEWER_ROLES,
    TIME_FORMAT,
    BalanceKey,
    EmployeeStatus,
    FailureKind,
    LeaveSession,
    LeaveStatus,
    Table,
    UserRole,
)
from hrms.common.exceptions import (
    AppException,
    ConflictError,
    ForbiddenException,
    NotFoundException,
    StaleRowError,
    StoreDisconnectedError,
    ValidationException,
    register_exception_handlers,
)
from hrms.common.results import ActionResult, settle

__all__ = [
    # Constants / Enums
    "APPROVER_ROLES",
    "RECORD_VIEWER_ROLES",
    "DATE_FORMAT",
    "TIME_FORMAT",
    "BalanceKey",
    "EmployeeStatus",
    "FailureKind",
    "LeaveSession",
    "LeaveStatus",
    "Table",
    "UserRole",
    # Exceptions
    "AppException",
    "ConflictError",
    "ForbiddenException",
    "NotFoundException",
    "StaleRowError",
    "StoreDisconnectedError",
    "ValidationException",
    "register_exception_handlers",
    # Results
    "ActionResult",
    "settle",
]
