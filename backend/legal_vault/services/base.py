"""
Shared plumbing for the entity services
"""
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from legal_vault.core.logger import logger
from legal_vault.utils.exceptions import AlreadyExistsError, InternalError


class BaseService:
    """
    Each service works on the request's session. Writes are committed through
    `_commit` so a failed statement never leaves the session half-applied.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(
        self,
        action: str,
        *,
        entity: Optional[str] = None,
        unique_field: Optional[str] = None,
        value: Any = None,
    ) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if entity and unique_field:
                logger.warning("Failed to %s: duplicate %s %r", action, unique_field, value)
                raise AlreadyExistsError(entity, unique_field, value) from e
            logger.error("Failed to %s: %s", action, str(e))
            raise InternalError() from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, str(e))
            raise InternalError() from e
