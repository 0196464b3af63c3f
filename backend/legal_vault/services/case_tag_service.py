"""
Case-progress tags

A flat registry ordered by sequence number. Names are unique regardless of
letter case; sequence numbers are free integers and are never renumbered.
"""
from typing import List, Optional

from sqlalchemy import func

from legal_vault.core.logger import logger
from legal_vault.db.models import CaseTag
from legal_vault.db.schemas import CaseTagCreate, CaseTagUpdate
from legal_vault.services.access_control import Actor
from legal_vault.services.base import BaseService
from legal_vault.utils.exceptions import AlreadyExistsError, NotFoundError
from legal_vault.utils.validators import require_text


class CaseTagService(BaseService):

    def get(self, tag_id: int) -> CaseTag:
        tag = self.db.get(CaseTag, tag_id)
        if not tag:
            raise NotFoundError("Case tag", tag_id)
        return tag

    def list(self) -> List[CaseTag]:
        return (
            self.db.query(CaseTag)
            .order_by(CaseTag.sequence_num.is_(None), CaseTag.sequence_num.asc(), CaseTag.id.asc())
            .all()
        )

    def _ensure_name_free(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(CaseTag.id).filter(func.lower(CaseTag.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(CaseTag.id != exclude_id)
        if query.first():
            raise AlreadyExistsError("Case tag", "name", name)

    def create(self, data: CaseTagCreate, actor: Actor) -> CaseTag:
        name = require_text(data.name, "name")
        self._ensure_name_free(name)

        tag = CaseTag(name=name, sequence_num=data.sequence_num, created_by=actor.user_id)
        self.db.add(tag)
        self._commit("create case tag", entity="Case tag", unique_field="name", value=name)
        self.db.refresh(tag)
        logger.info("Case tag %s '%s' created", tag.id, tag.name)
        return tag

    def update(self, tag_id: int, data: CaseTagUpdate) -> CaseTag:
        tag = self.get(tag_id)
        changes = data.model_dump(exclude_unset=True)

        if "name" in changes:
            name = require_text(changes["name"], "name")
            self._ensure_name_free(name, exclude_id=tag_id)
            tag.name = name
        if "sequence_num" in changes:
            tag.sequence_num = changes["sequence_num"]

        self._commit("update case tag", entity="Case tag", unique_field="name", value=tag.name)
        self.db.refresh(tag)
        return tag

    def delete(self, tag_id: int) -> int:
        tag = self.get(tag_id)
        self.db.delete(tag)
        self._commit("delete case tag")
        logger.info("Case tag %s deleted", tag_id)
        return tag_id
