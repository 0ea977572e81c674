"""Structured success / failure results returned by every service operation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel

from hrms.common.constants import FailureKind
from hrms.common.exceptions import (
    AppException,
    ConflictError,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)

if TYPE_CHECKING:
    from hrms.store.service import TabularStore


class ActionResult(BaseModel):
    """Outcome of an operation: ``success`` plus a human-readable ``msg``."""

    success: bool
    msg: str
    data: Optional[Any] = None
    error: Optional[FailureKind] = None

    @classmethod
    def ok(cls, msg: str, data: Any = None) -> ActionResult:
        return cls(success=True, msg=msg, data=data)

    @classmethod
    def fail(cls, msg: str, error: FailureKind = FailureKind.validation) -> ActionResult:
        return cls(success=False, msg=msg, error=error)

    @classmethod
    def denied(cls, msg: str = "Unauthorized") -> ActionResult:
        return cls.fail(msg, FailureKind.authorization)

    @classmethod
    def not_found(cls, msg: str) -> ActionResult:
        return cls.fail(msg, FailureKind.not_found)

    @classmethod
    def conflict(cls, msg: str) -> ActionResult:
        return cls.fail(msg, FailureKind.conflict)

    def to_exception(self) -> AppException:
        if self.error == FailureKind.authorization:
            return ForbiddenException(self.msg)
        if self.error == FailureKind.not_found:
            return NotFoundException(self.msg)
        if self.error == FailureKind.conflict:
            return ConflictError(self.msg)
        return ValidationException(self.msg)


async def settle(store: TabularStore, result: ActionResult) -> ActionResult:
    """Commit the unit of work, then surface a failure as an HTTP error.

    Failures write nothing but audit entries, so committing first keeps the
    record of a denied or rejected attempt.
    """
    await store.commit()
    if not result.success:
        raise result.to_exception()
    return result
