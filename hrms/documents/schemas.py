"""Document Pydantic v2 schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═════════════════════════════════════════════════════════════════════
# Uploaded documents
# ═════════════════════════════════════════════════════════════════════


class DocumentUploadRequest(BaseModel):
    document_type: str = Field("", max_length=100)
    file_name: str = Field("", max_length=255)
    file_url: str = Field("", max_length=500)
    emp_id: Optional[str] = None


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    doc_id: str
    emp_id: str
    document_type: str
    file_name: str
    file_url: str
    upload_date: datetime


# ═════════════════════════════════════════════════════════════════════
# Templates / generated documents
# ═════════════════════════════════════════════════════════════════════


class TemplateOut(BaseModel):
    template_id: str
    title: str
    content: str


class FillTemplateRequest(BaseModel):
    template_id: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class GeneratedDocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    generated_doc_id: str
    template_id: str
    emp_id: str
    status: str
    created_date: datetime
    approved_date: Optional[datetime] = None
    approved_by: Optional[str] = None
    data: dict[str, Any]
    file_url: Optional[str] = None


class GeneratedDataOut(BaseModel):
    my_docs: list[GeneratedDocumentOut]
    team_docs: list[GeneratedDocumentOut]


class RenderedDocumentOut(BaseModel):
    generated_doc_id: str
    file_name: str
    html: str
