"""
Case-progress tag endpoints
"""
from fastapi import APIRouter, Depends, status
from typing import List

from legal_vault.api.v1.deps import get_case_tag_service, get_current_actor, require_admin
from legal_vault.db.schemas import CaseTagCreate, CaseTagResponse, CaseTagUpdate, MessageResponse
from legal_vault.services.access_control import Actor
from legal_vault.services.case_tag_service import CaseTagService

router = APIRouter()


@router.get("/", response_model=List[CaseTagResponse])
def list_case_tags(
    _: Actor = Depends(get_current_actor),
    tags: CaseTagService = Depends(get_case_tag_service),
):
    return tags.list()


@router.post("/", response_model=CaseTagResponse, status_code=status.HTTP_201_CREATED)
def create_case_tag(
    body: CaseTagCreate,
    actor: Actor = Depends(require_admin),
    tags: CaseTagService = Depends(get_case_tag_service),
):
    return tags.create(body, actor)


@router.put("/{tag_id}", response_model=CaseTagResponse)
def update_case_tag(
    tag_id: int,
    body: CaseTagUpdate,
    _: Actor = Depends(require_admin),
    tags: CaseTagService = Depends(get_case_tag_service),
):
    return tags.update(tag_id, body)


@router.delete("/{tag_id}", response_model=MessageResponse)
def delete_case_tag(
    tag_id: int,
    _: Actor = Depends(require_admin),
    tags: CaseTagService = Depends(get_case_tag_service),
):
    tags.delete(tag_id)
    return {"message": f"Case tag {tag_id} deleted"}
