"""Documents router — uploaded files, templates, HR forms."""

from fastapi import APIRouter, Depends

from hrms.auth.dependencies import get_caller, get_store
from hrms.auth.schemas import CallerContext
from hrms.common.results import ActionResult, settle
from hrms.documents.schemas import (
    DocumentOut,
    DocumentUploadRequest,
    FillTemplateRequest,
    GeneratedDataOut,
    RenderedDocumentOut,
    TemplateOut,
)
from hrms.documents.service import DocumentService, FormService
from hrms.store.service import TabularStore

router = APIRouter(prefix="", tags=["documents"])


# ── Uploaded documents ──────────────────────────────────────────────

@router.get("", response_model=list[DocumentOut])
async def list_documents(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await DocumentService.list_documents(store, caller)


@router.post("", response_model=ActionResult, status_code=201)
async def upload_document(
    body: DocumentUploadRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await DocumentService.upload(
        store, caller, body.document_type, body.file_name, body.file_url, body.emp_id,
    )
    return await settle(store, result)


# ── Templates ───────────────────────────────────────────────────────

@router.get("/templates", response_model=list[TemplateOut])
async def list_templates(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await FormService.list_templates(store)


# ── HR forms ────────────────────────────────────────────────────────

@router.get("/forms", response_model=GeneratedDataOut)
async def generated_data(
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    return await FormService.get_generated_data(store, caller)


@router.post("/forms", response_model=ActionResult, status_code=201)
async def fill_template(
    body: FillTemplateRequest,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await FormService.fill_template(store, caller, body.template_id, body.data)
    return await settle(store, result)


@router.put("/forms/{generated_doc_id}/approve", response_model=ActionResult)
async def approve_form(
    generated_doc_id: str,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    result = await FormService.approve_generated(store, caller, generated_doc_id)
    return await settle(store, result)


@router.get("/forms/{generated_doc_id}/render", response_model=RenderedDocumentOut)
async def render_form(
    generated_doc_id: str,
    caller: CallerContext = Depends(get_caller),
    store: TabularStore = Depends(get_store),
):
    """HTML of an approved form with its placeholders filled."""
    result = await FormService.render_generated(store, caller, generated_doc_id)
    return (await settle(store, result)).data
