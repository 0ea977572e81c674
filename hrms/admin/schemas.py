"""Administration Pydantic v2 schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SettingsUpdateRequest(BaseModel):
    values: dict[str, str] = Field(..., min_length=1)
