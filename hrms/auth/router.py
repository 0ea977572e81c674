"""Auth router — current caller profile and balances."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from hrms.auth.dependencies import get_caller
from hrms.auth.schemas import CallerContext

router = APIRouter(prefix="", tags=["auth"])


# ── GET /me — resolved caller ───────────────────────────────────────

@router.get("/me", response_model=CallerContext)
async def get_me(caller: CallerContext = Depends(get_caller)):
    return caller
