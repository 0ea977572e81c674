"""Import every model module so all tables are registered on ``Base``."""

from hrms.assets.models import Asset  # noqa: F401
from hrms.attendance.models import AttendanceRecord, Holiday  # noqa: F401
from hrms.common.models import AppSetting, SystemLog  # noqa: F401
from hrms.core_hr.models import Employee  # noqa: F401
from hrms.dashboard.models import Announcement  # noqa: F401
from hrms.documents.models import (  # noqa: F401
    Document,
    DocumentTemplate,
    GeneratedDocument,
)
from hrms.leave.models import JobRun, LeaveRequest  # noqa: F401
from hrms.notifications.models import OutboxMessage  # noqa: F401
from hrms.payroll.models import Payslip  # noqa: F401
