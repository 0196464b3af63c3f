"""
Access control overlay

Decides whether an actor may see or change a case or a document. The rules
are pure functions over loaded rows so they behave the same on every
database backend.
"""
from dataclasses import dataclass
from typing import Iterable, List

from sqlalchemy import any_, literal, or_

from legal_vault.db.models import Case, Document, User, UserRole
from legal_vault.utils.exceptions import ForbiddenError


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of an operation"""
    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_lawyer(self) -> bool:
        return self.role == UserRole.lawyer

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(user_id=user.id, role=UserRole(user.role))


def is_case_visible(case: Case, user_id: int) -> bool:
    """
    A case is visible to a user when they own it, when it has no owner, or
    when they are on its allowed-viewers list.
    """
    if case.user_id is None or case.user_id == user_id:
        return True
    return user_id in (case.allowed_viewers or [])


def visible_case_filter(user_id: int, dialect_name: str):
    """
    SQL form of `is_case_visible`.

    On PostgreSQL allowed_viewers is an integer array and the filter is exact.
    Elsewhere it is stored as JSON, so the filter keeps every shared case and
    `filter_visible` checks membership afterwards.
    """
    if dialect_name == "postgresql":
        shared = literal(user_id) == any_(Case.allowed_viewers)
    else:
        shared = Case.allowed_viewers.isnot(None)
    return or_(Case.user_id == user_id, Case.user_id.is_(None), shared)


def filter_visible(cases: Iterable[Case], user_id: int) -> List[Case]:
    return [c for c in cases if is_case_visible(c, user_id)]


def can_view_case(actor: Actor, case: Case) -> bool:
    return actor.is_admin or is_case_visible(case, actor.user_id)


def can_edit_access(actor: Actor, case: Case) -> bool:
    """Only an Admin or the case owner may change who can see a case."""
    return actor.is_admin or (case.user_id is not None and case.user_id == actor.user_id)


def can_view_document(actor: Actor, document: Document) -> bool:
    if actor.is_admin:
        return True
    if actor.user_id in (document.tasked_to, document.tasked_by, document.submitted_by):
        return True
    return document.case is not None and is_case_visible(document.case, actor.user_id)


def ensure_case_visible(actor: Actor, case: Case) -> None:
    if not can_view_case(actor, case):
        raise ForbiddenError("You don't have access to this case")


def ensure_can_edit_access(actor: Actor, case: Case) -> None:
    if not can_edit_access(actor, case):
        raise ForbiddenError("Only an Admin or the case owner can change case access")


def ensure_document_visible(actor: Actor, document: Document) -> None:
    if not can_view_document(actor, document):
        raise ForbiddenError("You don't have access to this document")


def ensure_self_or_admin(actor: Actor, user_id: int) -> None:
    if not actor.is_admin and actor.user_id != user_id:
        raise ForbiddenError()
