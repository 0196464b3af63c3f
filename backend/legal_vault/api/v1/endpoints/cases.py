"""
Case management endpoints
"""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from legal_vault.api.v1.deps import (
    get_case_service,
    get_current_actor,
    get_document_service,
    require_admin,
    require_admin_or_lawyer,
)
from legal_vault.db.schemas import (
    CaseCategoryCreate,
    CaseCategoryResponse,
    CaseCreate,
    CaseResponse,
    CaseTypeCreate,
    CaseTypeResponse,
    CaseUpdate,
    CountResponse,
    DocumentResponse,
    MessageResponse,
    ShareAccessRequest,
)
from legal_vault.services.access_control import (
    Actor,
    ensure_can_edit_access,
    ensure_case_visible,
    ensure_self_or_admin,
)
from legal_vault.services.case_service import CaseService
from legal_vault.services.document_service import DocumentService

router = APIRouter()

# ============================================================================
# List & Search (must be before /{case_id})
# ============================================================================

@router.get("/", response_model=List[CaseResponse])
def list_cases(
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    """Admins see every case; everyone else sees the cases visible to them."""
    if actor.is_admin:
        return cases.list_all()
    return cases.visible_to(actor.user_id)


@router.get("/user/{user_id}", response_model=List[CaseResponse])
def list_cases_for_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    ensure_self_or_admin(actor, user_id)
    return cases.visible_to(user_id)


@router.get("/search", response_model=List[CaseResponse])
def search_cases(
    q: str = Query(..., min_length=1, description="Type, client, status or lawyer name"),
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    return cases.search(q, actor)


# ============================================================================
# Counts
# ============================================================================

@router.get("/count/processing", response_model=CountResponse)
def count_processing(
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    return {"count": cases.count_processing(None if actor.is_admin else actor.user_id)}


@router.get("/count/processing/{user_id}", response_model=CountResponse)
def count_processing_for_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    ensure_self_or_admin(actor, user_id)
    return {"count": cases.count_processing(user_id)}


@router.get("/count/archived", response_model=CountResponse)
def count_archived(
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    return {"count": cases.count_archived(None if actor.is_admin else actor.user_id)}


@router.get("/count/archived/{user_id}", response_model=CountResponse)
def count_archived_for_user(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    ensure_self_or_admin(actor, user_id)
    return {"count": cases.count_archived(user_id)}


# ============================================================================
# Categories & Types
# ============================================================================

@router.get("/categories", response_model=List[CaseCategoryResponse])
def list_categories(
    _: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    return cases.list_categories()


@router.post("/categories", response_model=CaseCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CaseCategoryCreate,
    _: Actor = Depends(require_admin),
    cases: CaseService = Depends(get_case_service),
):
    return cases.create_category(body.name)


@router.get("/types", response_model=List[CaseTypeResponse])
def list_types(
    category_id: Optional[int] = Query(None),
    _: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    return cases.list_types(category_id)


@router.post("/types", response_model=CaseTypeResponse, status_code=status.HTTP_201_CREATED)
def create_type(
    body: CaseTypeCreate,
    _: Actor = Depends(require_admin),
    cases: CaseService = Depends(get_case_service),
):
    return cases.create_type(body)


# ============================================================================
# Single case
# ============================================================================

@router.post("/", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
def create_case(
    body: CaseCreate,
    actor: Actor = Depends(require_admin_or_lawyer),
    cases: CaseService = Depends(get_case_service),
):
    return cases.create(body, actor)


@router.get("/{case_id}", response_model=CaseResponse)
def get_case(
    case_id: int,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    case = cases.get(case_id)
    ensure_case_visible(actor, case)
    return case


@router.put("/{case_id}", response_model=CaseResponse)
def update_case(
    case_id: int,
    body: CaseUpdate,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    case = cases.get(case_id)
    ensure_case_visible(actor, case)
    if "user_id" in body.model_fields_set and body.user_id != case.user_id:
        ensure_can_edit_access(actor, case)
    return cases.update(case_id, body, actor)


@router.patch("/{case_id}/access", response_model=CaseResponse)
def share_case_access(
    case_id: int,
    body: ShareAccessRequest,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
):
    """Replace the allowed-viewers list. An empty list removes all sharing."""
    ensure_can_edit_access(actor, cases.get(case_id))
    return cases.share_access(case_id, body.allowed_viewers, actor.user_id)


@router.delete("/{case_id}", response_model=MessageResponse)
def delete_case(
    case_id: int,
    _: Actor = Depends(require_admin),
    cases: CaseService = Depends(get_case_service),
):
    cases.delete(case_id)
    return {"message": f"Case {case_id} deleted"}


@router.get("/{case_id}/documents", response_model=List[DocumentResponse])
def list_case_documents(
    case_id: int,
    include_deleted: bool = Query(False),
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
    documents: DocumentService = Depends(get_document_service),
):
    ensure_case_visible(actor, cases.get(case_id))
    return documents.by_case(case_id, include_deleted=include_deleted)
