"""
In-app notifications

Read/unread and cleared/visible are independent flags. Clearing hides a
notification from the default listing but keeps the row.
"""
from typing import List

from sqlalchemy import func, not_, update

from legal_vault.core.logger import logger
from legal_vault.db.models import Notification
from legal_vault.services.base import BaseService
from legal_vault.utils.exceptions import NotFoundError


class NotificationService(BaseService):

    def get(self, notification_id: int) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if not notification:
            raise NotFoundError("Notification", notification_id)
        return notification

    def list_for_user(self, user_id: int) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_cleared == False)  # noqa: E712
            .order_by(Notification.date_created.desc(), Notification.id.desc())
            .all()
        )

    def unread_count(self, user_id: int) -> int:
        return (
            self.db.query(func.count(Notification.id))
            .filter(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
                Notification.is_cleared == False,  # noqa: E712
            )
            .scalar()
        ) or 0

    def notify(self, user_id: int, title: str, message: str = None) -> Notification:
        """
        Queue a notification on the current unit of work. The caller's
        commit persists it together with the change that triggered it.
        """
        notification = Notification(user_id=user_id, title=title, message=message)
        self.db.add(notification)
        logger.debug("Notification queued for user %s: %s", user_id, title)
        return notification

    def toggle_read(self, notification_id: int) -> Notification:
        # single statement, so two concurrent toggles never read the same old value
        result = self.db.execute(
            update(Notification)
            .where(Notification.id == notification_id)
            .values(is_read=not_(Notification.is_read))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("Notification", notification_id)
        self._commit("toggle notification read state")

        notification = self.get(notification_id)
        self.db.refresh(notification)
        return notification

    def clear_all(self, user_id: int) -> int:
        result = self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_cleared == False)  # noqa: E712
            .values(is_cleared=True)
            .execution_options(synchronize_session=False)
        )
        self._commit("clear notifications")
        logger.info("Cleared %s notifications for user %s", result.rowcount, user_id)
        return result.rowcount
