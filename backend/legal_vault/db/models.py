"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    TIMESTAMP,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.ext.mutable import MutableList
from sqlalchemy.orm import relationship
from sqlalchemy import Index

from legal_vault.db.database import Base

# ============================================================================
# Enums
# ============================================================================

class UserRole(str, enum.Enum):
    """User roles"""
    admin = "Admin"
    lawyer = "Lawyer"
    staff = "Staff"
    paralegal = "Paralegal"


class UserStatus(str, enum.Enum):
    active = "Active"
    suspended = "Suspended"


class CaseStatus(str, enum.Enum):
    """Case status enum"""
    processing = "Processing"
    completed = "Completed"
    dismissed = "Dismissed"
    archived_completed = "Archived (Completed)"
    archived_dismissed = "Archived (Dismissed)"


ARCHIVED_CASE_STATUSES = (CaseStatus.archived_completed, CaseStatus.archived_dismissed)


class DocumentType(str, enum.Enum):
    support = "Support"
    task = "Task"


class PaymentType(str, enum.Enum):
    cash = "Cash"
    cheque = "Cheque"


def _enum_type(enum_cls) -> SQLEnum:
    # persist the human-readable value ("Admin"), not the member name
    return SQLEnum(enum_cls, values_callable=lambda members: [m.value for m in members])


# Empty viewer lists are stored as SQL NULL, never as "[]"
ViewerIdList = MutableList.as_mutable(
    JSON(none_as_null=True).with_variant(ARRAY(Integer), "postgresql")
)
PathList = MutableList.as_mutable(
    JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")
)


# ============================================================================
# Models
# ============================================================================

class Branch(Base):
    """Law firm branch office"""
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    address = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    users = relationship("User", back_populates="branch")


class User(Base):
    """Firm member: admin, lawyer, staff or paralegal"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    profile_image = Column(Text, nullable=True)
    branch_id = Column(Integer, ForeignKey("branches.id", ondelete="SET NULL"), nullable=True)

    role = Column(_enum_type(UserRole), nullable=False, default=UserRole.staff)
    status = Column(_enum_type(UserStatus), nullable=False, default=UserStatus.active)

    # Login verification
    is_verified = Column(Boolean, nullable=False, default=False)
    otp_code = Column(String(10), nullable=True)
    otp_expires_at = Column(TIMESTAMP, nullable=True)
    password_reset_token = Column(String(255), nullable=True)
    password_reset_token_expiry = Column(TIMESTAMP, nullable=True)

    # Audit
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login_at = Column(TIMESTAMP, nullable=True)

    branch = relationship("Branch", back_populates="users")
    cases = relationship("Case", back_populates="owner", foreign_keys="Case.user_id")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
    logs = relationship("UserLog", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


class UserLog(Base):
    """Login/logout trail"""
    __tablename__ = "user_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    log_type = Column(String(50), nullable=False, default="User Log")
    ip_address = Column(String(64), nullable=True)
    user_fullname = Column(String(255), nullable=True)
    user_profile = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, index=True)

    user = relationship("User", back_populates="logs")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fullname = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    cases = relationship("Case", back_populates="client")


class CaseCategory(Base):
    """Top level of the case taxonomy (e.g. Criminal, Civil)"""
    __tablename__ = "case_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)

    types = relationship("CaseType", back_populates="category")


class CaseType(Base):
    """Second level of the case taxonomy, with its indicative fee range"""
    __tablename__ = "case_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    fee = Column(String(100), nullable=True)
    category_id = Column(Integer, ForeignKey("case_categories.id", ondelete="SET NULL"), nullable=True)

    category = relationship("CaseCategory", back_populates="types")


class Case(Base):
    """Legal case model"""
    __tablename__ = "cases"
    __table_args__ = (
        Index("ix_cases_user_status", "user_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    status = Column(_enum_type(CaseStatus), nullable=False, default=CaseStatus.processing)
    fee = Column(Numeric(12, 2), nullable=False, default=0)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    remarks = Column(Text, nullable=True)
    verdict = Column(Text, nullable=True)

    # Physical storage location of the paper file
    cabinet = Column(String(50), nullable=True)
    drawer = Column(String(50), nullable=True)

    # Progress tag (see CaseTag)
    tag = Column(String(255), nullable=True)
    tag_list = Column(PathList, nullable=True)

    # Ownership; NULL means unassigned
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    assigned_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    allowed_viewers = Column(ViewerIdList, nullable=True)

    client_id = Column(Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    category_id = Column(Integer, ForeignKey("case_categories.id", ondelete="SET NULL"), nullable=True)
    type_id = Column(Integer, ForeignKey("case_types.id", ondelete="SET NULL"), nullable=True)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    last_updated = Column(TIMESTAMP, nullable=True)
    last_updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    owner = relationship("User", back_populates="cases", foreign_keys=[user_id])
    client = relationship("Client", back_populates="cases")
    category = relationship("CaseCategory")
    case_type = relationship("CaseType")
    documents = relationship("Document", back_populates="case", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="case", cascade="all, delete-orphan")

    @property
    def owner_name(self):
        return self.owner.full_name if self.owner else None

    @property
    def client_name(self):
        return self.client.fullname if self.client else None

    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def type_name(self):
        return self.case_type.name if self.case_type else None


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(_enum_type(PaymentType), nullable=False)

    cheque_name = Column(String(255), nullable=True)
    cheque_number = Column(String(100), nullable=True)
    cheque_branch = Column(String(255), nullable=True)
    cheque_location = Column(String(255), nullable=True)

    payment_date = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    case = relationship("Case", back_populates="payments")


class Document(Base):
    """Supporting or task document attached to a case"""
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_case_deleted", "case_id", "is_deleted"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    case_id = Column(Integer, ForeignKey("cases.id", ondelete="CASCADE"), nullable=True, index=True)

    name = Column(String(255), nullable=False)
    doc_type = Column(_enum_type(DocumentType), nullable=False)
    description = Column(Text, nullable=True)
    task = Column(Text, nullable=True)
    file_path = Column(Text, nullable=True)
    priority = Column(String(50), nullable=True)
    due_date = Column(TIMESTAMP, nullable=True)
    status = Column(String(50), nullable=True)
    tag = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=True)
    reference = Column(PathList, nullable=True)

    tasked_to = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    tasked_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    submitted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # Soft delete
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    deleted_date = Column(TIMESTAMP, nullable=True)

    # Trash marker set through regular edits
    is_trashed = Column(Boolean, nullable=False, default=False)
    trashed_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    trashed_date = Column(TIMESTAMP, nullable=True)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    last_updated = Column(TIMESTAMP, nullable=True)
    last_updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    case = relationship("Case", back_populates="documents")

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_user_cleared", "user_id", "is_cleared"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    is_cleared = Column(Boolean, nullable=False, default=False)
    date_created = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="notifications")


class CaseTag(Base):
    """One step of the case-progress taxonomy"""
    __tablename__ = "case_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    sequence_num = Column(Integer, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
