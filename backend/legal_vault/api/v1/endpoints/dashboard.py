"""
Dashboard endpoint: counts sized to the caller's role
"""
from fastapi import APIRouter, Depends

from legal_vault.api.v1.deps import (
    get_case_service,
    get_current_actor,
    get_document_service,
    get_notification_service,
    get_user_service,
)
from legal_vault.db.schemas import DashboardStats
from legal_vault.services.access_control import Actor
from legal_vault.services.case_service import CaseService
from legal_vault.services.document_service import DocumentService
from legal_vault.services.notification_service import NotificationService
from legal_vault.services.user_service import UserService

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
    documents: DocumentService = Depends(get_document_service),
    users: UserService = Depends(get_user_service),
    notifications: NotificationService = Depends(get_notification_service),
):
    unread = notifications.unread_count(actor.user_id)
    if actor.is_admin:
        return DashboardStats(
            scope="global",
            total_users=users.count(),
            processing_cases=cases.count_processing(),
            archived_cases=cases.count_archived(),
            documents_for_approval=documents.count_for_approval(),
            pending_tasks=documents.count_pending_tasks(),
            unread_notifications=unread,
        )

    return DashboardStats(
        scope="user",
        processing_cases=cases.count_processing(actor.user_id),
        archived_cases=cases.count_archived(actor.user_id),
        documents_for_approval=documents.count_for_approval() if actor.is_lawyer else None,
        pending_tasks=documents.count_user_pending_tasks(actor.user_id),
        unread_notifications=unread,
    )
