"""Audit sink — append-only, best-effort entries in ``system_logs``."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from hrms.common.constants import Table

if TYPE_CHECKING:
    from hrms.store.service import TabularStore

logger = logging.getLogger(__name__)


async def record_action(
    store: TabularStore,
    *,
    actor: str,
    action: str,
    details: str,
    meta: str = "Web",
    timestamp: Optional[datetime] = None,
) -> bool:
    """
    Append an audit entry. Never raises.

    Args:
        store: Tabular store of the current unit of work.
        actor: E-mail of the caller, or ``"System"`` for scheduled jobs.
        action: Short label, e.g. "Leave Apply", "Auth Failed".
        details: Human-readable description.
        meta: Origin of the action ("Web", "Job", "CLI").
        timestamp: Defaults to now.

    Returns:
        ``True`` if the entry was written.
    """
    try:
        await store.append_row(
            Table.system_logs,
            {
                "logged_at": timestamp or datetime.now(timezone.utc),
                "user_email": actor or "anonymous",
                "action": action,
                "details": details,
                "meta": meta,
            },
        )
    except Exception:
        logger.exception("Audit entry '%s' by %s could not be written", action, actor)
        return False
    return True
