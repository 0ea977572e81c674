"""Asset Pydantic v2 schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AssetCreateRequest(BaseModel):
    asset_type: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=200)
    serial_no: str = Field(..., min_length=1, max_length=100)


class AssetAssignRequest(BaseModel):
    asset_id: str = Field(..., min_length=1)
    emp_id: str = Field(..., min_length=1)


class AssetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    asset_id: str
    asset_type: str
    model: Optional[str] = None
    serial_no: Optional[str] = None
    assigned_to: Optional[str] = None
    status: str
