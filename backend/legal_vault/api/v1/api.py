"""
Main API router aggregator
"""
from fastapi import APIRouter

from legal_vault.api.v1.endpoints import (
    auth,
    case_tags,
    cases,
    clients,
    dashboard,
    documents,
    health,
    notifications,
    payments,
    uploads,
    users,
)

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(cases.router, prefix="/cases", tags=["Cases"])
api_router.include_router(documents.router, prefix="/documents", tags=["Documents"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(case_tags.router, prefix="/case-tags", tags=["Case Tags"])
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])
api_router.include_router(clients.router, prefix="/clients", tags=["Clients"])
api_router.include_router(clients.branch_router, prefix="/branches", tags=["Branches"])
api_router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
