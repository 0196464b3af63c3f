"""
Pydantic validation schemas

Update schemas are partial: every field is optional and services apply only
the fields the client actually sent (``model_dump(exclude_unset=True)``).
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from legal_vault.db.models import (
    CaseStatus,
    DocumentType,
    PaymentType,
    UserRole,
    UserStatus,
)


class MessageResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int


# ============================================================================
# User Schemas
# ============================================================================

class UserBase(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8, max_length=100)
    role: UserRole = UserRole.staff
    profile_image: Optional[str] = None
    branch_id: Optional[int] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=100)
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    profile_image: Optional[str] = None
    branch_id: Optional[int] = None


class UserRoleUpdate(BaseModel):
    role: UserRole


class UserResponse(UserBase):
    id: int
    full_name: str
    role: UserRole
    status: UserStatus
    profile_image: Optional[str] = None
    branch_id: Optional[int] = None
    is_verified: bool
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserLogResponse(BaseModel):
    id: int
    user_id: int
    action: str
    log_type: str
    ip_address: Optional[str] = None
    user_fullname: Optional[str] = None
    user_profile: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LawyerSpecialization(BaseModel):
    category_id: int
    category_name: str
    user_id: int
    first_name: str
    middle_name: Optional[str] = None
    last_name: str


# ============================================================================
# Auth Schemas
# ============================================================================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class VerifyOtpRequest(BaseModel):
    user_id: int
    code: str = Field(..., min_length=4, max_length=10)


class ResendOtpRequest(BaseModel):
    user_id: int


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class OtpChallengeResponse(BaseModel):
    message: str
    user_id: int


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ============================================================================
# Branch & Client Schemas
# ============================================================================

class BranchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = None


class BranchResponse(BranchCreate):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    fullname: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None


class ClientUpdate(BaseModel):
    fullname: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None


class ClientResponse(BaseModel):
    id: int
    fullname: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Case Schemas
# ============================================================================

class CaseCreate(BaseModel):
    status: CaseStatus = CaseStatus.processing
    fee: float = Field(0, ge=0)
    remarks: Optional[str] = None
    cabinet: Optional[str] = Field(None, max_length=50)
    drawer: Optional[str] = Field(None, max_length=50)
    user_id: Optional[int] = None
    client_id: Optional[int] = None
    category_id: Optional[int] = None
    type_id: Optional[int] = None
    assigned_by: Optional[int] = None
    tag: Optional[str] = None
    tag_list: Optional[List[str]] = None


class CaseUpdate(BaseModel):
    """Partial update. `balance` is intentionally absent: only payments move it."""
    status: Optional[CaseStatus] = None
    fee: Optional[float] = Field(None, ge=0)
    remarks: Optional[str] = None
    verdict: Optional[str] = None
    cabinet: Optional[str] = Field(None, max_length=50)
    drawer: Optional[str] = Field(None, max_length=50)
    user_id: Optional[int] = None
    client_id: Optional[int] = None
    category_id: Optional[int] = None
    type_id: Optional[int] = None
    tag: Optional[str] = None
    tag_list: Optional[List[str]] = None


class ShareAccessRequest(BaseModel):
    allowed_viewers: List[int] = Field(default_factory=list)


class CaseResponse(BaseModel):
    id: int
    status: CaseStatus
    fee: float
    balance: float
    remarks: Optional[str] = None
    verdict: Optional[str] = None
    cabinet: Optional[str] = None
    drawer: Optional[str] = None
    tag: Optional[str] = None
    tag_list: Optional[List[str]] = None
    user_id: Optional[int] = None
    assigned_by: Optional[int] = None
    allowed_viewers: Optional[List[int]] = None
    client_id: Optional[int] = None
    category_id: Optional[int] = None
    type_id: Optional[int] = None
    owner_name: Optional[str] = None
    client_name: Optional[str] = None
    category_name: Optional[str] = None
    type_name: Optional[str] = None
    created_at: datetime
    last_updated: Optional[datetime] = None
    last_updated_by: Optional[int] = None

    class Config:
        from_attributes = True


class CaseCategoryCreate(BaseModel):
    name: Optional[str] = None


class CaseCategoryResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CaseTypeCreate(BaseModel):
    name: Optional[str] = None
    fee: Optional[Dict[str, Any]] = Field(None, description='{"min": 1000, "max": 5000}')
    category_id: Optional[int] = None


class CaseTypeResponse(BaseModel):
    id: int
    name: str
    fee: Optional[str] = None
    category_id: Optional[int] = None

    class Config:
        from_attributes = True


# ============================================================================
# Document Schemas
# ============================================================================

class DocumentCreate(BaseModel):
    name: str
    doc_type: DocumentType
    description: Optional[str] = None
    task: Optional[str] = None
    file_path: Optional[str] = None
    priority: Optional[str] = Field(None, max_length=50)
    due_date: Optional[datetime] = None
    status: Optional[str] = Field(None, max_length=50)
    tag: Optional[str] = None
    password: Optional[str] = None
    tasked_to: Optional[int] = None
    tasked_by: Optional[int] = None
    submitted_by: Optional[int] = None
    reference: Optional[List[str]] = None
    case_id: Optional[int] = None


class DocumentUpdate(BaseModel):
    name: Optional[str] = None
    doc_type: Optional[DocumentType] = None
    description: Optional[str] = None
    task: Optional[str] = None
    file_path: Optional[str] = None
    priority: Optional[str] = Field(None, max_length=50)
    due_date: Optional[datetime] = None
    status: Optional[str] = Field(None, max_length=50)
    tag: Optional[str] = None
    password: Optional[str] = None
    tasked_to: Optional[int] = None
    tasked_by: Optional[int] = None
    submitted_by: Optional[int] = None
    reference: Optional[List[str]] = None
    case_id: Optional[int] = None
    is_trashed: Optional[bool] = None


class RemoveReferenceRequest(BaseModel):
    reference_path: str = Field(..., min_length=1)


class DocumentResponse(BaseModel):
    id: int
    case_id: Optional[int] = None
    name: str
    doc_type: DocumentType
    description: Optional[str] = None
    task: Optional[str] = None
    file_path: Optional[str] = None
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[str] = None
    tag: Optional[str] = None
    has_password: bool
    reference: Optional[List[str]] = None
    tasked_to: Optional[int] = None
    tasked_by: Optional[int] = None
    submitted_by: Optional[int] = None
    is_deleted: bool
    deleted_by: Optional[int] = None
    deleted_date: Optional[datetime] = None
    is_trashed: bool
    trashed_by: Optional[int] = None
    trashed_date: Optional[datetime] = None
    created_at: datetime
    last_updated: Optional[datetime] = None
    last_updated_by: Optional[int] = None

    class Config:
        from_attributes = True


class DocumentActionResponse(BaseModel):
    message: str
    document_id: int


# ============================================================================
# Payment Schemas
# ============================================================================

class PaymentCreate(BaseModel):
    case_id: int
    amount: float = Field(..., gt=0)
    payment_type: PaymentType
    cheque_name: Optional[str] = None
    cheque_number: Optional[str] = None
    cheque_branch: Optional[str] = None
    cheque_location: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    case_id: int
    user_id: Optional[int] = None
    amount: float
    payment_type: PaymentType
    cheque_name: Optional[str] = None
    cheque_number: Optional[str] = None
    cheque_branch: Optional[str] = None
    cheque_location: Optional[str] = None
    payment_date: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Notification Schemas
# ============================================================================

class NotificationResponse(BaseModel):
    id: int
    user_id: int
    title: str
    message: Optional[str] = None
    is_read: bool
    is_cleared: bool
    date_created: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Case Tag Schemas
# ============================================================================

class CaseTagCreate(BaseModel):
    name: Optional[str] = None
    sequence_num: Optional[int] = None


class CaseTagUpdate(BaseModel):
    name: Optional[str] = None
    sequence_num: Optional[int] = None


class CaseTagResponse(BaseModel):
    id: int
    name: str
    sequence_num: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================================
# Upload Schemas
# ============================================================================

class PresignUploadRequest(BaseModel):
    folder: str = Field(..., description="supportingDocs | taskedDocs | referenceDocs | profiles")
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(default="application/pdf")
    file_size: int = Field(..., gt=0, description="File size in bytes")


class PresignUploadResponse(BaseModel):
    upload_url: str
    key: str
    method: str = "PUT"
    expires_in: int
    headers: Dict[str, str] = Field(default_factory=dict)


class DownloadUrlResponse(BaseModel):
    url: str
    key: str
    expires_in: int


# ============================================================================
# Dashboard Schemas
# ============================================================================

class DashboardStats(BaseModel):
    scope: str
    total_users: Optional[int] = None
    processing_cases: int
    archived_cases: int
    documents_for_approval: Optional[int] = None
    pending_tasks: int
    unread_notifications: int
