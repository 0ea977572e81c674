"""Document service — uploaded files and template-driven HR forms.

HR forms move ``Pending -> Approved``. Only approved forms can be rendered;
rendering substitutes ``{{key}}`` placeholders from the submitted data plus
``{{current_date}}``. Turning the HTML into a PDF is left to the client.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from html import escape
from typing import Any, Mapping, Optional

from hrms.auth.schemas import CallerContext
from hrms.common.audit import record_action
from hrms.common.clock import format_date, generate_id, local_today
from hrms.common.constants import ApprovalStatus, Table, UserRole
from hrms.common.results import ActionResult
from hrms.store.service import Record, RowRef, TabularStore

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")


def render_template(content: str, data: Mapping[str, Any], today: date) -> str:
    """Fill ``{{key}}`` placeholders. Unknown keys are left as they are."""
    values = {k: escape(str(v)) for k, v in data.items()}
    values.setdefault("current_date", format_date(today))

    def _sub(match: re.Match) -> str:
        return values.get(match.group(1), match.group(0))

    return _PLACEHOLDER.sub(_sub, content)


# ═════════════════════════════════════════════════════════════════════
# DocumentService
# ═════════════════════════════════════════════════════════════════════


class DocumentService:
    """Async operations on uploaded document records."""

    @staticmethod
    async def upload(
        store: TabularStore,
        caller: CallerContext,
        document_type: str,
        file_name: str,
        file_url: str,
        emp_id: Optional[str] = None,
    ) -> ActionResult:
        """File a document record; ADMIN/HR may file it for someone else."""
        if not (document_type and file_name and file_url):
            return ActionResult.fail("Please fill out all fields.")

        owner = emp_id if (caller.is_approver and emp_id) else caller.emp_id
        record = await store.append_row(
            Table.documents,
            [generate_id("DOC"), owner, document_type, file_name, file_url, datetime.now(timezone.utc)],
        )
        await record_action(
            store, actor=caller.email, action="Document Upload", details=f"{file_name} for {owner}",
        )
        return ActionResult.ok("Document Added", data=record)

    @staticmethod
    async def list_documents(store: TabularStore, caller: CallerContext) -> list[Record]:
        if caller.is_approver:
            return await store.read_table(Table.documents)
        return await store.read_table(Table.documents, emp_id=caller.emp_id)


# ═════════════════════════════════════════════════════════════════════
# FormService
# ═════════════════════════════════════════════════════════════════════


class FormService:
    """Async operations on document templates and the forms filled from them."""

    @staticmethod
    async def list_templates(store: TabularStore) -> list[Record]:
        return await store.read_table(Table.document_templates)

    @staticmethod
    async def fill_template(
        store: TabularStore,
        caller: CallerContext,
        template_id: str,
        data: Mapping[str, Any],
    ) -> ActionResult:
        if await store.find_one(Table.document_templates, template_id=template_id) is None:
            return ActionResult.not_found("Template not found.")

        record = await store.append_row(
            Table.generated_documents,
            {
                "generated_doc_id": generate_id("GENDOC"),
                "template_id": template_id,
                "emp_id": caller.emp_id,
                "status": ApprovalStatus.pending.value,
                "created_date": datetime.now(timezone.utc),
                "data": dict(data),
            },
        )
        await record_action(
            store, actor=caller.email, action="HR Form Filled", details=f"Template: {template_id}",
        )
        return ActionResult.ok("Form submitted for approval.", data=record)

    @staticmethod
    async def approve_generated(
        store: TabularStore,
        caller: CallerContext,
        generated_doc_id: str,
    ) -> ActionResult:
        """Approve a filled form.

        Nobody but ADMIN may approve their own form. Otherwise ADMIN/HR or
        the requester's manager of record may approve.
        """
        doc = await store.find_one(Table.generated_documents, generated_doc_id=generated_doc_id)
        if doc is None:
            return ActionResult.not_found("Document not found")
        if doc["emp_id"] == caller.emp_id and not caller.has_role([UserRole.admin]):
            await record_action(
                store,
                actor=caller.email,
                action="Doc Approve Failed",
                details=f"Self-approval attempt by {caller.emp_id} for {generated_doc_id}",
            )
            return ActionResult.denied("You cannot approve your own request.")
        if doc["status"] != ApprovalStatus.pending.value:
            return ActionResult.conflict("Already processed")

        requester = await store.find_one(Table.employees, emp_id=doc["emp_id"])
        is_manager = requester is not None and requester.get("manager_id") == caller.emp_id
        if not (caller.is_approver or is_manager):
            await record_action(
                store,
                actor=caller.email,
                action="Doc Approve Failed",
                details=f"Unauthorized attempt by {caller.emp_id} for {generated_doc_id}",
            )
            return ActionResult.denied("You are not authorized to approve this request.")

        await store.update_cells(
            Table.generated_documents,
            RowRef.of(doc),
            {
                "status": ApprovalStatus.approved.value,
                "approved_date": datetime.now(timezone.utc),
                "approved_by": caller.email,
            },
        )
        await record_action(
            store,
            actor=caller.email,
            action="HR Form Approved",
            details=f"Doc ID: {generated_doc_id} by {caller.email}",
        )
        return ActionResult.ok("Document Approved")

    @staticmethod
    async def render_generated(
        store: TabularStore,
        caller: CallerContext,
        generated_doc_id: str,
        today: Optional[date] = None,
    ) -> ActionResult:
        """HTML for an approved form, visible to its owner and ADMIN/HR."""
        doc = await store.find_one(Table.generated_documents, generated_doc_id=generated_doc_id)
        if doc is None or doc["status"] != ApprovalStatus.approved.value:
            return ActionResult.not_found("Document not found or not approved.")
        if doc["emp_id"] != caller.emp_id and not caller.is_approver:
            await record_action(
                store,
                actor=caller.email,
                action="Doc Render Failed",
                details=f"Unauthorized attempt by {caller.emp_id} for {generated_doc_id}",
            )
            return ActionResult.denied()

        template = await store.find_one(Table.document_templates, template_id=doc["template_id"])
        if template is None:
            return ActionResult.not_found("Template not found.")

        html = render_template(template["content"], doc.get("data") or {}, today or local_today())
        await record_action(
            store, actor=caller.email, action="Document Rendered", details=f"Doc ID: {generated_doc_id}",
        )
        return ActionResult.ok(
            "Document rendered",
            data={
                "generated_doc_id": generated_doc_id,
                "file_name": f"{doc['template_id']}-{doc['emp_id']}.html",
                "html": html,
            },
        )

    @staticmethod
    async def get_generated_data(store: TabularStore, caller: CallerContext) -> dict:
        """The caller's forms, plus pending forms they can approve."""
        docs = await store.read_table(Table.generated_documents)
        my_docs = [d for d in docs if d["emp_id"] == caller.emp_id]
        pending = [d for d in docs if d["status"] == ApprovalStatus.pending.value]
        if caller.is_approver:
            team_docs = pending
        else:
            reports = {
                e["emp_id"]
                for e in await store.read_table(Table.employees, manager_id=caller.emp_id)
            }
            team_docs = [d for d in pending if d["emp_id"] in reports]
        return {"my_docs": my_docs, "team_docs": team_docs}
