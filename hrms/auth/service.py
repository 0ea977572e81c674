"""Auth service — bearer tokens and caller resolution.

The bearer token only carries the caller e-mail (``sub``). Everything else
about the caller (role, manager, balances) is read from the ``employees``
table on every request, so role changes apply immediately.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from hrms.auth.schemas import CallerContext
from hrms.common.audit import record_action
from hrms.common.constants import Table, UserRole
from hrms.common.results import ActionResult
from hrms.config import settings
from hrms.store.service import TabularStore

logger = logging.getLogger(__name__)

ACCESS_DENIED = "Access Denied: Email not found."


class InvalidTokenError(Exception):
    """The bearer token is missing, malformed, expired or of the wrong type."""


# ── JWT helpers ─────────────────────────────────────────────────────

def create_access_token(email: str, expires_hours: Optional[int] = None) -> tuple[str, int]:
    """Return (encoded_jwt, expires_in_seconds) for ``email``."""
    hours = expires_hours or settings.JWT_EXPIRY_HOURS
    payload = {
        "sub": email.strip().lower(),
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, hours * 3600


def decode_access_token(token: str) -> str:
    """Return the caller e-mail carried by ``token``."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise InvalidTokenError("Token has expired.")
    except JWTError:
        raise InvalidTokenError("Invalid token.")

    if payload.get("type") != "access":
        raise InvalidTokenError("Invalid token type.")
    email = payload.get("sub")
    if not email:
        raise InvalidTokenError("Token carries no subject.")
    return email


# ═════════════════════════════════════════════════════════════════════
# AccessService
# ═════════════════════════════════════════════════════════════════════


class AccessService:
    """Resolves callers to employee records and gates privileged actions."""

    @staticmethod
    async def resolve_caller(store: TabularStore, email: Optional[str]) -> ActionResult:
        """Find the employee whose e-mail matches, ignoring case and padding.

        On success ``data`` is a ``CallerContext``. An unknown e-mail is an
        authorization failure and is written to the audit log.
        """
        wanted = (email or "").strip().lower()
        if wanted:
            for record in await store.read_table(Table.employees):
                if str(record.get("email") or "").strip().lower() == wanted:
                    return ActionResult.ok("OK", data=CallerContext.from_record(record))

        logger.info("Unknown caller %r", email)
        await record_action(
            store,
            actor=wanted or "anonymous",
            action="Auth Failed",
            details=f"No employee with email {email!r}",
        )
        return ActionResult.denied(ACCESS_DENIED)

    @staticmethod
    async def require_roles(
        store: TabularStore,
        caller: CallerContext,
        roles: Iterable[UserRole],
        *,
        action: str,
        msg: str = "Unauthorized",
    ) -> Optional[ActionResult]:
        """Return ``None`` if the caller holds one of ``roles``.

        Otherwise the denial is audited as ``"<action> Failed"`` and a
        failure result is returned for the caller to pass back.
        """
        roles = list(roles)
        if caller.has_role(roles):
            return None
        await record_action(
            store,
            actor=caller.email,
            action=f"{action} Failed",
            details=(
                f"Role {caller.role or '-'} is not one of "
                f"{', '.join(r.value for r in roles)}"
            ),
        )
        return ActionResult.denied(msg)
