"""Document ORM models: Document, DocumentTemplate, GeneratedDocument."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base
from hrms.store.models import SheetRowMixin


# ═════════════════════════════════════════════════════════════════════
# Uploaded documents
# ═════════════════════════════════════════════════════════════════════


class Document(Base, SheetRowMixin):
    __tablename__ = "documents"

    HEADERS = ("doc_id", "emp_id", "document_type", "file_name", "file_url", "upload_date")

    doc_id: Mapped[str] = mapped_column(sa.String(40), unique=True, nullable=False)
    emp_id: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    document_type: Mapped[str] = mapped_column(sa.String(100), nullable=False)
    file_name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(sa.String(500), nullable=False)
    upload_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


# ═════════════════════════════════════════════════════════════════════
# Templates and the documents generated from them
# ═════════════════════════════════════════════════════════════════════


class DocumentTemplate(Base, SheetRowMixin):
    __tablename__ = "document_templates"

    HEADERS = ("template_id", "title", "content")

    template_id: Mapped[str] = mapped_column(sa.String(40), unique=True, nullable=False)
    title: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    content: Mapped[str] = mapped_column(sa.Text, nullable=False)


class GeneratedDocument(Base, SheetRowMixin):
    __tablename__ = "generated_documents"

    HEADERS = (
        "generated_doc_id",
        "template_id",
        "emp_id",
        "status",
        "created_date",
        "approved_date",
        "approved_by",
        "data",
        "file_url",
    )

    generated_doc_id: Mapped[str] = mapped_column(sa.String(40), unique=True, nullable=False)
    template_id: Mapped[str] = mapped_column(sa.String(40), nullable=False)
    emp_id: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    status: Mapped[str] = mapped_column(sa.String(20), nullable=False, default="Pending")
    created_date: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    approved_date: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    approved_by: Mapped[Optional[str]] = mapped_column(sa.String(255))
    data: Mapped[dict[str, Any]] = mapped_column(sa.JSON, nullable=False, default=dict)
    file_url: Mapped[Optional[str]] = mapped_column(sa.String(500))
