"""
Notification endpoints

Users act on their own notifications; Admins may act on anyone's.
"""
from fastapi import APIRouter, Depends
from typing import List

from legal_vault.api.v1.deps import get_current_actor, get_notification_service
from legal_vault.db.schemas import CountResponse, MessageResponse, NotificationResponse
from legal_vault.services.access_control import Actor, ensure_self_or_admin
from legal_vault.services.notification_service import NotificationService

router = APIRouter()


@router.get("/user/{user_id}", response_model=List[NotificationResponse])
def list_notifications(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    notifications: NotificationService = Depends(get_notification_service),
):
    ensure_self_or_admin(actor, user_id)
    return notifications.list_for_user(user_id)


@router.get("/user/{user_id}/unread-count", response_model=CountResponse)
def unread_count(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    notifications: NotificationService = Depends(get_notification_service),
):
    ensure_self_or_admin(actor, user_id)
    return {"count": notifications.unread_count(user_id)}


@router.patch("/user/{user_id}/clear", response_model=MessageResponse)
def clear_all(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    notifications: NotificationService = Depends(get_notification_service),
):
    ensure_self_or_admin(actor, user_id)
    cleared = notifications.clear_all(user_id)
    return {"message": f"{cleared} notifications cleared"}


@router.patch("/{notification_id}/toggle-read", response_model=NotificationResponse)
def toggle_read(
    notification_id: int,
    actor: Actor = Depends(get_current_actor),
    notifications: NotificationService = Depends(get_notification_service),
):
    ensure_self_or_admin(actor, notifications.get(notification_id).user_id)
    return notifications.toggle_read(notification_id)
