"""Holiday calendar and working-day counter.

Weekend rule: every Sunday, plus the 1st and 3rd Saturday of the month.
Everything else is a working day unless it appears in the holiday set.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Iterable, Union

from hrms.common.clock import format_date
from hrms.common.constants import Table

if TYPE_CHECKING:
    from hrms.store.service import TabularStore

_SATURDAY = 5
_SUNDAY = 6
_OFF_SATURDAYS = {1, 3}


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def normalise_holidays(values: Iterable[Union[date, datetime, str]]) -> frozenset[str]:
    """Reduce any mix of dates and ``yyyy-MM-dd`` strings to a set of strings."""
    return frozenset(format_date(_as_date(v)) for v in values if v)


def is_non_working_day(day: Union[date, datetime], holidays: Iterable = ()) -> bool:
    """True for Sundays, the 1st/3rd Saturday, and listed holidays."""
    day = _as_date(day)
    weekday = day.weekday()
    if weekday == _SUNDAY:
        return True
    if weekday == _SATURDAY:
        return math.ceil(day.day / 7) in _OFF_SATURDAYS
    if not isinstance(holidays, frozenset):
        holidays = normalise_holidays(holidays)
    return format_date(day) in holidays


@dataclass
class WorkingDayCount:
    days: int = 0
    excluded_dates: list[date] = field(default_factory=list)

    @property
    def excluded_count(self) -> int:
        return len(self.excluded_dates)


def count_working_days_detailed(
    start: Union[date, str],
    end: Union[date, str],
    holidays: Iterable = (),
) -> WorkingDayCount:
    """Count working days in ``[start, end]`` and list the days skipped."""
    start, end = _as_date(start), _as_date(end)
    result = WorkingDayCount()
    if start > end:
        return result

    holiday_set = normalise_holidays(holidays)
    day = start
    while day <= end:
        if is_non_working_day(day, holiday_set):
            result.excluded_dates.append(day)
        else:
            result.days += 1
        day += timedelta(days=1)
    return result


def count_working_days(
    start: Union[date, str],
    end: Union[date, str],
    holidays: Iterable = (),
) -> int:
    return count_working_days_detailed(start, end, holidays).days


async def load_holidays(store: TabularStore) -> frozenset[str]:
    """Holiday dates from the ``holidays`` table as ``yyyy-MM-dd`` strings."""
    rows = await store.read_table(Table.holidays)
    return normalise_holidays(row["holiday_date"] for row in rows)
