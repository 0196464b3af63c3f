# legal_vault/api/v1/deps.py

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt

from legal_vault.core.security import decode_access_token
from legal_vault.db.database import get_db
from legal_vault.db.models import User, UserStatus
from legal_vault.services.access_control import Actor
from legal_vault.services.auth_service import AuthService
from legal_vault.services.case_service import CaseService
from legal_vault.services.case_tag_service import CaseTagService
from legal_vault.services.client_service import ClientService
from legal_vault.services.document_service import DocumentService
from legal_vault.services.notification_service import NotificationService
from legal_vault.services.payment_service import PaymentService
from legal_vault.services.user_service import UserService
from legal_vault.utils.exceptions import ForbiddenError, UnauthorizedError

security = HTTPBearer(auto_error=False)

# ============================================================================
# JWT Dependency
# ============================================================================

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Validate JWT token and return current user.
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid token")

    # Tokens carry both "sub" (standard) and "user_id"
    user_id = payload.get("user_id") or payload.get("sub")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")

    user = db.get(User, user_id)
    if not user:
        raise UnauthorizedError("User not found")

    if user.status == UserStatus.suspended:
        raise ForbiddenError("User account is suspended")

    return user


def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(current_user)


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not actor.is_admin:
        raise ForbiddenError("Admin access required")
    return actor


def require_admin_or_lawyer(actor: Actor = Depends(get_current_actor)) -> Actor:
    if not (actor.is_admin or actor.is_lawyer):
        raise ForbiddenError("Admin or Lawyer access required")
    return actor


# ============================================================================
# Services
# ============================================================================

def get_case_service(db: Session = Depends(get_db)) -> CaseService:
    return CaseService(db)


def get_document_service(db: Session = Depends(get_db)) -> DocumentService:
    return DocumentService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_case_tag_service(db: Session = Depends(get_db)) -> CaseTagService:
    return CaseTagService(db)


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(db)


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    return ClientService(db)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)
