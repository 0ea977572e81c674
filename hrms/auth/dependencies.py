"""Auth dependencies — store per request, bearer identity, caller resolution."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Request
from fastapi.exceptions import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.auth.schemas import CallerContext
from hrms.auth.service import AccessService, InvalidTokenError, decode_access_token
from hrms.common.results import settle
from hrms.database import get_db
from hrms.store.service import TabularStore


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header.")
    return auth_header[7:]


async def get_store(
    db: Optional[AsyncSession] = Depends(get_db),
) -> TabularStore:
    """One tabular store per request, sharing the request's session."""
    return TabularStore(db)


def get_caller_email(request: Request) -> str:
    """The authenticated caller e-mail carried by the bearer token."""
    try:
        return decode_access_token(_extract_bearer(request))
    except InvalidTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc))


async def get_caller(
    email: str = Depends(get_caller_email),
    store: TabularStore = Depends(get_store),
) -> CallerContext:
    """Resolve the caller to an employee record, or answer 403.

    The denial is committed before raising so the "Auth Failed" audit
    entry survives the request's rollback.
    """
    result = await AccessService.resolve_caller(store, email)
    await settle(store, result)
    return result.data
