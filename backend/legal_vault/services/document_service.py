"""
Document service

Lifecycle of a document:

    Active --soft_delete--> Trashed --restore--> Active
    Active | Trashed --permanent_delete--> (row removed)

Each transition is one committed row change. Files in the bucket are left
where they are.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_

from legal_vault.core.logger import logger
from legal_vault.core.security import get_password_hash
from legal_vault.db.models import (
    ARCHIVED_CASE_STATUSES,
    Case,
    CaseStatus,
    Document,
    DocumentType,
    User,
)
from legal_vault.db.schemas import DocumentCreate, DocumentUpdate
from legal_vault.services.access_control import Actor
from legal_vault.services.base import BaseService
from legal_vault.services.notification_service import NotificationService
from legal_vault.utils.exceptions import NotFoundError
from legal_vault.utils.helpers import apply_partial_update, dedupe, like_pattern
from legal_vault.utils.validators import require_text

APPROVED = "approved"
DONE = "done"
CLOSED_TASK_STATUSES = ("approved", "completed")


def _not_deleted():
    return Document.is_deleted == False  # noqa: E712


class DocumentService(BaseService):

    def __init__(self, db):
        super().__init__(db)
        self.notifications = NotificationService(db)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, doc_id: int) -> Document:
        document = self.db.get(Document, doc_id)
        if not document:
            raise NotFoundError("Document", doc_id)
        return document

    def list(self, include_deleted: bool = False) -> List[Document]:
        query = self.db.query(Document)
        if not include_deleted:
            query = query.filter(_not_deleted())
        return query.order_by(Document.created_at.desc(), Document.id.desc()).all()

    def list_trash(self) -> List[Document]:
        return (
            self.db.query(Document)
            .filter(Document.is_deleted == True)  # noqa: E712
            .order_by(Document.deleted_date.desc(), Document.id.desc())
            .all()
        )

    def by_case(self, case_id: int, include_deleted: bool = False) -> List[Document]:
        query = self.db.query(Document).filter(Document.case_id == case_id)
        if not include_deleted:
            query = query.filter(_not_deleted())
        return query.order_by(Document.id.asc()).all()

    def by_lawyer(self, user_id: int) -> List[Document]:
        """Documents attached to cases the lawyer owns"""
        return (
            self.db.query(Document)
            .join(Case, Document.case_id == Case.id)
            .filter(Case.user_id == user_id, _not_deleted())
            .order_by(Document.id.desc())
            .all()
        )

    def by_submitter(self, user_id: int) -> List[Document]:
        return (
            self.db.query(Document)
            .filter(Document.submitted_by == user_id, _not_deleted())
            .order_by(Document.id.desc())
            .all()
        )

    def tasks_for_user(self, user_id: int) -> List[Document]:
        """
        Task documents tasked to or by the user, on the user's cases, or on
        any case that was not dismissed.
        """
        return (
            self.db.query(Document)
            .outerjoin(Case, Document.case_id == Case.id)
            .filter(
                Document.doc_type == DocumentType.task,
                _not_deleted(),
                or_(
                    Document.tasked_to == user_id,
                    Document.tasked_by == user_id,
                    Case.user_id == user_id,
                    Case.status != CaseStatus.dismissed,
                ),
            )
            .order_by(Document.id.desc())
            .all()
        )

    def search(self, term: str) -> List[Document]:
        pattern = like_pattern(term)
        return (
            self.db.query(Document)
            .filter(
                _not_deleted(),
                or_(
                    Document.name.ilike(pattern),
                    Document.tag.ilike(pattern),
                    Document.status.ilike(pattern),
                ),
            )
            .order_by(Document.id.desc())
            .all()
        )

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def count_for_approval(self) -> int:
        return (
            self.db.query(func.count(Document.id))
            .filter(_not_deleted(), func.lower(Document.status) == DONE)
            .scalar()
        ) or 0

    def count_processing(self, user_id: Optional[int] = None) -> int:
        """Documents on cases still in Processing, optionally for one lawyer"""
        query = (
            self.db.query(func.count(Document.id))
            .join(Case, Document.case_id == Case.id)
            .filter(_not_deleted(), Case.status == CaseStatus.processing)
        )
        if user_id is not None:
            query = query.filter(Case.user_id == user_id)
        return query.scalar() or 0

    def count_pending_tasks(self) -> int:
        return (
            self.db.query(func.count(Document.id))
            .filter(
                _not_deleted(),
                Document.doc_type == DocumentType.task,
                or_(Document.status.is_(None), func.lower(Document.status) != APPROVED),
            )
            .scalar()
        ) or 0

    def count_user_pending_tasks(self, user_id: int) -> int:
        return (
            self.db.query(func.count(func.distinct(Document.id)))
            .outerjoin(Case, Document.case_id == Case.id)
            .filter(
                _not_deleted(),
                Document.doc_type == DocumentType.task,
                or_(
                    Document.tasked_to == user_id,
                    Document.tasked_by == user_id,
                    Case.user_id == user_id,
                ),
                or_(
                    Document.status.is_(None),
                    func.lower(Document.status).notin_(CLOSED_TASK_STATUSES),
                ),
                or_(Case.id.is_(None), Case.status.notin_(ARCHIVED_CASE_STATUSES)),
            )
            .scalar()
        ) or 0

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _check_references(self, values: dict) -> None:
        case_id = values.get("case_id")
        if case_id is not None and not self.db.get(Case, case_id):
            raise NotFoundError("Case", case_id)
        for field in ("tasked_to", "tasked_by", "submitted_by"):
            user_id = values.get(field)
            if user_id is not None and not self.db.get(User, user_id):
                raise NotFoundError("User", user_id)

    def create(self, data: DocumentCreate, actor: Actor) -> Document:
        values = data.model_dump()
        values["name"] = require_text(values.get("name"), "name")
        self._check_references(values)

        password = values.pop("password", None)
        values["password_hash"] = get_password_hash(password) if password else None
        values["reference"] = dedupe(values.get("reference")) or None
        if values.get("submitted_by") is None:
            values["submitted_by"] = actor.user_id
        if values["doc_type"] == DocumentType.task and values.get("tasked_by") is None:
            values["tasked_by"] = actor.user_id

        document = Document(**values, last_updated_by=actor.user_id)
        self.db.add(document)
        self.db.flush()

        if document.tasked_to is not None and document.tasked_to != actor.user_id:
            self.notifications.notify(
                document.tasked_to, "New task assigned", f"You were tasked with '{document.name}'."
            )

        self._commit("create document")
        self.db.refresh(document)
        logger.info("Document %s created by user %s", document.id, actor.user_id)
        return document

    def update(self, doc_id: int, data: DocumentUpdate, actor: Actor) -> Document:
        document = self.get(doc_id)
        changes = data.model_dump(exclude_unset=True)
        self._check_references(changes)

        if "name" in changes and changes["name"] is not None:
            changes["name"] = require_text(changes["name"], "name")
        if "password" in changes:
            password = changes.pop("password")
            changes["password_hash"] = get_password_hash(password) if password else None
        if "reference" in changes:
            changes["reference"] = dedupe(changes["reference"]) or None

        now = datetime.utcnow()
        if "is_trashed" in changes:
            trashed = bool(changes.pop("is_trashed"))
            if trashed and not document.is_trashed:
                document.is_trashed = True
                document.trashed_by = actor.user_id
                document.trashed_date = now
            elif not trashed and document.is_trashed:
                document.is_trashed = False
                document.trashed_by = None
                document.trashed_date = None

        previous_status = document.status
        apply_partial_update(document, changes, required=("name", "doc_type"))
        document.last_updated = now
        document.last_updated_by = actor.user_id

        if (
            document.status
            and document.status != previous_status
            and document.status.lower() == DONE
            and document.tasked_by is not None
            and document.tasked_by != actor.user_id
        ):
            self.notifications.notify(
                document.tasked_by, "Task submitted for approval", f"'{document.name}' is ready for review."
            )

        self._commit("update document")
        self.db.refresh(document)
        return document

    def remove_reference(self, doc_id: int, reference_path: str, actor: Actor) -> Document:
        document = self.get(doc_id)
        remaining = [p for p in (document.reference or []) if p != reference_path]
        document.reference = remaining or None
        document.last_updated = datetime.utcnow()
        document.last_updated_by = actor.user_id
        self._commit("remove document reference")
        self.db.refresh(document)
        return document

    def soft_delete(self, doc_id: int, actor: Actor) -> Document:
        """Move a document to the trash. Trashing it again re-stamps it."""
        document = self.get(doc_id)
        document.is_deleted = True
        document.deleted_by = actor.user_id
        document.deleted_date = datetime.utcnow()
        self._commit("soft delete document")
        self.db.refresh(document)
        logger.info("Document %s moved to trash by user %s", doc_id, actor.user_id)
        return document

    def restore(self, doc_id: int) -> Document:
        document = self.get(doc_id)
        document.is_deleted = False
        document.deleted_by = None
        document.deleted_date = None
        self._commit("restore document")
        self.db.refresh(document)
        logger.info("Document %s restored", doc_id)
        return document

    def permanent_delete(self, doc_id: int) -> int:
        document = self.get(doc_id)
        self.db.delete(document)
        self._commit("permanently delete document")
        logger.info("Document %s permanently deleted", doc_id)
        return doc_id

