"""
User management endpoints
"""
from typing import List

from fastapi import APIRouter, Depends, Query, status

from legal_vault.api.v1.deps import (
    get_current_actor,
    get_current_user,
    get_user_service,
    require_admin,
)
from legal_vault.db.models import User
from legal_vault.db.schemas import (
    CountResponse,
    LawyerSpecialization,
    MessageResponse,
    UserCreate,
    UserLogResponse,
    UserResponse,
    UserRoleUpdate,
    UserUpdate,
)
from legal_vault.services.access_control import Actor, ensure_self_or_admin
from legal_vault.services.user_service import UserService

router = APIRouter()


@router.get("/", response_model=List[UserResponse])
def list_users(
    _: Actor = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.list()


@router.get("/count", response_model=CountResponse)
def count_users(
    _: Actor = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return {"count": users.count()}


@router.get("/search", response_model=List[UserResponse])
def search_users(
    q: str = Query(..., min_length=1, description="Name, email, phone, role or status"),
    _: Actor = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.search(q)


@router.get("/logs", response_model=List[UserLogResponse])
def list_user_logs(
    _: Actor = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.list_logs()


@router.get("/lawyers/specializations", response_model=List[LawyerSpecialization])
def lawyer_specializations(
    _: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return users.lawyer_specializations()


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    return users.get(user_id)


@router.get("/{user_id}/logs", response_model=List[UserLogResponse])
def get_user_logs(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    ensure_self_or_admin(actor, user_id)
    return users.logs_for_user(user_id)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    actor: Actor = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return users.create(body, actor)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    body: UserUpdate,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    """Partial update. Users may edit themselves; Admins may edit anyone."""
    ensure_self_or_admin(actor, user_id)
    return users.update(user_id, body, actor)


@router.patch("/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: int,
    body: UserRoleUpdate,
    actor: Actor = Depends(get_current_actor),
    users: UserService = Depends(get_user_service),
):
    """
    Admins may assign any role. A Lawyer may claim Admin only while the
    firm has no Admin.
    """
    return users.update_role(actor, user_id, body.role)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    _: Actor = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    users.delete(user_id)
    return {"message": f"User {user_id} deleted"}
