"""
Case service

Cases, their taxonomy (categories and types) and the share-access overlay.
Cases are only ever hard-deleted.
"""
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.orm import aliased

from legal_vault.core.logger import logger
from legal_vault.db.models import (
    ARCHIVED_CASE_STATUSES,
    Case,
    CaseCategory,
    CaseStatus,
    CaseType,
    Client,
    User,
)
from legal_vault.db.schemas import CaseCreate, CaseTypeCreate, CaseUpdate
from legal_vault.services.access_control import (
    Actor,
    filter_visible,
    visible_case_filter,
)
from legal_vault.services.base import BaseService
from legal_vault.services.notification_service import NotificationService
from legal_vault.utils.exceptions import AlreadyExistsError, NotFoundError
from legal_vault.utils.helpers import (
    apply_partial_update,
    dedupe,
    format_fee_range,
    like_pattern,
    normalize_viewer_ids,
)
from legal_vault.utils.validators import require_text, validate_fee_range


class CaseService(BaseService):

    def __init__(self, db):
        super().__init__(db)
        self.notifications = NotificationService(db)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, case_id: int) -> Case:
        case = self.db.get(Case, case_id)
        if not case:
            raise NotFoundError("Case", case_id)
        return case

    def list_all(self) -> List[Case]:
        return self.db.query(Case).order_by(Case.created_at.desc(), Case.id.desc()).all()

    @property
    def _dialect(self) -> str:
        return self.db.get_bind().dialect.name

    def _visible(self, query, user_id: int) -> List[Case]:
        query = query.filter(visible_case_filter(user_id, self._dialect))
        if self._dialect == "postgresql":
            return query.all()
        return filter_visible(query.all(), user_id)

    def visible_to(self, user_id: int) -> List[Case]:
        """Cases the user owns, cases with no owner, and cases shared with them."""
        return self._visible(
            self.db.query(Case).order_by(Case.created_at.desc(), Case.id.desc()), user_id
        )

    def search(self, term: str, actor: Actor) -> List[Case]:
        owner = aliased(User)
        pattern = like_pattern(term)
        query = (
            self.db.query(Case)
            .outerjoin(CaseType, Case.type_id == CaseType.id)
            .outerjoin(Client, Case.client_id == Client.id)
            .outerjoin(owner, Case.user_id == owner.id)
            .filter(
                or_(
                    CaseType.name.ilike(pattern),
                    Client.fullname.ilike(pattern),
                    cast(Case.status, String).ilike(pattern),
                    owner.first_name.ilike(pattern),
                    owner.middle_name.ilike(pattern),
                    owner.last_name.ilike(pattern),
                )
            )
            .order_by(Case.created_at.desc(), Case.id.desc())
        )
        if actor.is_admin:
            return query.all()
        return self._visible(query, actor.user_id)

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def _count(self, statuses: Iterable[CaseStatus], user_id: Optional[int]) -> int:
        query = self.db.query(Case).filter(Case.status.in_(tuple(statuses)))
        if user_id is None:
            return query.with_entities(func.count(Case.id)).scalar() or 0
        if self._dialect == "postgresql":
            return (
                query.filter(visible_case_filter(user_id, self._dialect))
                .with_entities(func.count(Case.id))
                .scalar()
                or 0
            )
        return len(self._visible(query, user_id))

    def count_processing(self, user_id: Optional[int] = None) -> int:
        return self._count((CaseStatus.processing,), user_id)

    def count_archived(self, user_id: Optional[int] = None) -> int:
        return self._count(ARCHIVED_CASE_STATUSES, user_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _check_references(self, values: dict) -> None:
        for field, model, name in (
            ("user_id", User, "User"),
            ("assigned_by", User, "User"),
            ("client_id", Client, "Client"),
            ("category_id", CaseCategory, "Case category"),
            ("type_id", CaseType, "Case type"),
        ):
            ref_id = values.get(field)
            if ref_id is not None and not self.db.get(model, ref_id):
                raise NotFoundError(name, ref_id)

    def create(self, data: CaseCreate, actor: Actor) -> Case:
        values = data.model_dump()
        self._check_references(values)

        values["tag_list"] = dedupe(values.get("tag_list")) or None
        fee = Decimal(str(values.pop("fee")))
        if values.get("user_id") is not None and values.get("assigned_by") is None:
            values["assigned_by"] = actor.user_id

        case = Case(**values, fee=fee, balance=fee, last_updated_by=actor.user_id)
        self.db.add(case)
        self.db.flush()

        self.notifications.notify(actor.user_id, "New case created", f"Case #{case.id} was created.")
        if case.user_id is not None and case.user_id != actor.user_id:
            self.notifications.notify(case.user_id, "Case assigned to you", f"Case #{case.id} was assigned to you.")

        self._commit("create case")
        self.db.refresh(case)
        logger.info("Case %s created by user %s", case.id, actor.user_id)
        return case

    def update(self, case_id: int, data: CaseUpdate, actor: Actor) -> Case:
        case = self.get(case_id)
        changes = data.model_dump(exclude_unset=True)
        self._check_references(changes)

        if changes.get("tag_list") is not None:
            changes["tag_list"] = dedupe(changes["tag_list"]) or None
        if changes.get("fee") is not None:
            changes["fee"] = Decimal(str(changes["fee"]))

        previous_owner = case.user_id
        changed = apply_partial_update(case, changes, required=("status", "fee"))

        case.last_updated = datetime.utcnow()
        case.last_updated_by = actor.user_id

        if "user_id" in changed and case.user_id is not None:
            case.assigned_by = actor.user_id
            if case.user_id != actor.user_id:
                self.notifications.notify(
                    case.user_id, "Case assigned to you", f"Case #{case.id} was assigned to you."
                )
        elif changed and case.user_id is not None and case.user_id != actor.user_id:
            self.notifications.notify(case.user_id, "Case updated", f"Case #{case.id} was updated.")

        self._commit("update case")
        self.db.refresh(case)
        logger.info(
            "Case %s updated by user %s (fields=%s, previous_owner=%s)",
            case.id, actor.user_id, ",".join(changed) or "-", previous_owner,
        )
        return case

    def delete(self, case_id: int) -> int:
        case = self.get(case_id)
        self.db.delete(case)
        self._commit("delete case")
        logger.info("Case %s deleted", case_id)
        return case_id

    def share_access(self, case_id: int, viewer_ids: Iterable[int], updated_by: int) -> Case:
        """
        Replace the case's allowed viewers. An empty list stores NULL.
        """
        case = self.get(case_id)
        ids = normalize_viewer_ids(viewer_ids)
        previous = set(case.allowed_viewers or [])

        case.allowed_viewers = ids
        case.last_updated = datetime.utcnow()
        case.last_updated_by = updated_by

        for viewer_id in ids or []:
            if viewer_id not in previous and viewer_id != case.user_id:
                self.notifications.notify(viewer_id, "Case shared with you", f"You can now view case #{case.id}.")

        self._commit("share case access")
        self.db.refresh(case)
        logger.info("Case %s access set to %s by user %s", case.id, ids, updated_by)
        return case

    # ------------------------------------------------------------------
    # Categories and types
    # ------------------------------------------------------------------

    def list_categories(self) -> List[CaseCategory]:
        return self.db.query(CaseCategory).order_by(CaseCategory.name.asc()).all()

    def create_category(self, name: Optional[str]) -> CaseCategory:
        name = require_text(name, "name")
        exists = (
            self.db.query(CaseCategory.id)
            .filter(func.lower(CaseCategory.name) == name.lower())
            .first()
        )
        if exists:
            raise AlreadyExistsError("Case category", "name", name)

        category = CaseCategory(name=name)
        self.db.add(category)
        self._commit("create case category")
        self.db.refresh(category)
        return category

    def list_types(self, category_id: Optional[int] = None) -> List[CaseType]:
        query = self.db.query(CaseType)
        if category_id is not None:
            query = query.filter(CaseType.category_id == category_id)
        return query.order_by(CaseType.name.asc()).all()

    def create_type(self, data: CaseTypeCreate) -> CaseType:
        name = require_text(data.name, "name")
        min_fee, max_fee = validate_fee_range(data.fee)
        if data.category_id is not None and not self.db.get(CaseCategory, data.category_id):
            raise NotFoundError("Case category", data.category_id)

        exists = self.db.query(CaseType.id).filter(func.lower(CaseType.name) == name.lower()).first()
        if exists:
            raise AlreadyExistsError("Case type", "name", name)

        case_type = CaseType(
            name=name,
            fee=format_fee_range(min_fee, max_fee),
            category_id=data.category_id,
        )
        self.db.add(case_type)
        self._commit("create case type")
        self.db.refresh(case_type)
        return case_type
