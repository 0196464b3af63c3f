"""
Document endpoints

DELETE /{id} moves a document to the trash, POST /{id}/restore brings it
back, DELETE /{id}/permanent removes the row (Admin only).
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List

from legal_vault.api.v1.deps import (
    get_case_service,
    get_current_actor,
    get_document_service,
    require_admin,
    require_admin_or_lawyer,
)
from legal_vault.db.schemas import (
    CountResponse,
    DocumentActionResponse,
    DocumentCreate,
    DocumentResponse,
    DocumentUpdate,
    RemoveReferenceRequest,
)
from legal_vault.services.access_control import (
    Actor,
    can_view_document,
    ensure_case_visible,
    ensure_document_visible,
    ensure_self_or_admin,
)
from legal_vault.services.case_service import CaseService
from legal_vault.services.document_service import DocumentService

router = APIRouter()


def _visible(actor: Actor, documents):
    if actor.is_admin:
        return documents
    return [d for d in documents if can_view_document(actor, d)]


# ============================================================================
# Lists (must be before /{doc_id})
# ============================================================================

@router.get("/", response_model=List[DocumentResponse])
def list_documents(
    include_deleted: bool = Query(False, description="Include documents in the trash"),
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    return _visible(actor, documents.list(include_deleted=include_deleted))


@router.get("/trash", response_model=List[DocumentResponse])
def list_trash(
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    return _visible(actor, documents.list_trash())


@router.get("/search", response_model=List[DocumentResponse])
def search_documents(
    q: str = Query(..., min_length=1, description="Name, tag or status"),
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    return _visible(actor, documents.search(q))


@router.get("/lawyer/{user_id}", response_model=List[DocumentResponse])
def list_by_lawyer(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_self_or_admin(actor, user_id)
    return documents.by_lawyer(user_id)


@router.get("/submitter/{user_id}", response_model=List[DocumentResponse])
def list_by_submitter(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_self_or_admin(actor, user_id)
    return documents.by_submitter(user_id)


@router.get("/tasks/{user_id}", response_model=List[DocumentResponse])
def list_tasks_for_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_self_or_admin(actor, user_id)
    return documents.tasks_for_user(user_id)


# ============================================================================
# Counts
# ============================================================================

@router.get("/count/for-approval", response_model=CountResponse)
def count_for_approval(
    _: Actor = Depends(require_admin_or_lawyer),
    documents: DocumentService = Depends(get_document_service),
):
    return {"count": documents.count_for_approval()}


@router.get("/count/processing", response_model=CountResponse)
def count_processing(
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    return {"count": documents.count_processing(None if actor.is_admin else actor.user_id)}


@router.get("/count/pending-tasks", response_model=CountResponse)
def count_pending_tasks(
    _: Actor = Depends(require_admin),
    documents: DocumentService = Depends(get_document_service),
):
    return {"count": documents.count_pending_tasks()}


@router.get("/count/pending-tasks/{user_id}", response_model=CountResponse)
def count_user_pending_tasks(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_self_or_admin(actor, user_id)
    return {"count": documents.count_user_pending_tasks(user_id)}


# ============================================================================
# Single document
# ============================================================================

@router.post("/", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
def create_document(
    body: DocumentCreate,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
    documents: DocumentService = Depends(get_document_service),
):
    if body.case_id is not None:
        ensure_case_visible(actor, cases.get(body.case_id))
    return documents.create(body, actor)


@router.get("/{doc_id}", response_model=DocumentResponse)
def get_document(
    doc_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    document = documents.get(doc_id)
    ensure_document_visible(actor, document)
    return document


@router.put("/{doc_id}", response_model=DocumentResponse)
def update_document(
    doc_id: int,
    body: DocumentUpdate,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_document_visible(actor, documents.get(doc_id))
    if body.case_id is not None:
        ensure_case_visible(actor, cases.get(body.case_id))
    return documents.update(doc_id, body, actor)


@router.patch("/{doc_id}/remove-reference", response_model=DocumentResponse)
def remove_reference(
    doc_id: int,
    body: RemoveReferenceRequest,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_document_visible(actor, documents.get(doc_id))
    return documents.remove_reference(doc_id, body.reference_path, actor)


@router.delete("/{doc_id}", response_model=DocumentResponse)
def soft_delete_document(
    doc_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_document_visible(actor, documents.get(doc_id))
    return documents.soft_delete(doc_id, actor)


@router.post("/{doc_id}/restore", response_model=DocumentResponse)
def restore_document(
    doc_id: int,
    actor: Actor = Depends(get_current_actor),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_document_visible(actor, documents.get(doc_id))
    return documents.restore(doc_id)


@router.delete("/{doc_id}/permanent", response_model=DocumentActionResponse)
def permanently_delete_document(
    doc_id: int,
    _: Actor = Depends(require_admin),
    documents: DocumentService = Depends(get_document_service),
):
    documents.permanent_delete(doc_id)
    return {"message": "Document permanently deleted", "document_id": doc_id}
