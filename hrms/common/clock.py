"""Reference-zone clock helpers.

Every date the system stores or compares is expressed in the configured
reference time zone, never the server's local zone.
"""

from __future__ import annotations

import secrets
import time
from datetime import date, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo

from hrms.common.constants import DATE_FORMAT, TIME_FORMAT
from hrms.config import settings


@lru_cache(maxsize=4)
def reference_zone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or settings.TIMEZONE)


def local_now() -> datetime:
    """Current instant, expressed in the reference zone."""
    return datetime.now(reference_zone())


def local_today() -> date:
    return local_now().date()


def to_reference_zone(value: datetime) -> datetime:
    """Convert an aware datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo("UTC"))
    return value.astimezone(reference_zone())


def format_date(value: date | datetime) -> str:
    if isinstance(value, datetime):
        value = to_reference_zone(value)
    return value.strftime(DATE_FORMAT)


def format_time(value: datetime) -> str:
    return to_reference_zone(value).strftime(TIME_FORMAT)


def generate_id(prefix: str) -> str:
    """Return ``PREFIX-<epoch ms><suffix>``.

    The millisecond prefix keeps identifiers ordered by creation time; the
    random suffix keeps two ids minted in the same millisecond distinct.
    """
    return f"{prefix}-{time.time_ns() // 1_000_000}{secrets.token_hex(2).upper()}"
