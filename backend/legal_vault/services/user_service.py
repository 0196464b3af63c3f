"""
User service

Accounts, the role-change policy, login trail and lawyer specialisations.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, cast, exists, func, or_, update
from sqlalchemy.orm import aliased

from legal_vault.core.logger import logger
from legal_vault.core.security import get_password_hash
from legal_vault.db.models import (
    Branch,
    Case,
    CaseCategory,
    User,
    UserLog,
    UserRole,
    UserStatus,
)
from legal_vault.db.schemas import UserCreate, UserUpdate
from legal_vault.services.access_control import Actor
from legal_vault.services.base import BaseService
from legal_vault.utils.exceptions import AlreadyExistsError, ForbiddenError, NotFoundError
from legal_vault.utils.helpers import apply_partial_update, like_pattern


class UserService(BaseService):

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == (email or "").strip().lower())
            .first()
        )

    def list(self) -> List[User]:
        return self.db.query(User).order_by(User.id.asc()).all()

    def count(self) -> int:
        return self.db.query(func.count(User.id)).scalar() or 0

    def search(self, term: str) -> List[User]:
        pattern = like_pattern(term)
        return (
            self.db.query(User)
            .filter(
                or_(
                    User.first_name.ilike(pattern),
                    User.middle_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                    User.email.ilike(pattern),
                    User.phone.ilike(pattern),
                    cast(User.role, String).ilike(pattern),
                    cast(User.status, String).ilike(pattern),
                )
            )
            .order_by(User.id.asc())
            .all()
        )

    def _ensure_email_free(self, email: str, exclude_id: Optional[int] = None) -> None:
        query = self.db.query(User.id).filter(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise AlreadyExistsError("User", "email", email)

    def _check_branch(self, branch_id: Optional[int]) -> None:
        if branch_id is not None and not self.db.get(Branch, branch_id):
            raise NotFoundError("Branch", branch_id)

    def create(self, data: UserCreate, actor: Optional[Actor] = None) -> User:
        email = data.email.strip().lower()
        self._ensure_email_free(email)
        self._check_branch(data.branch_id)

        values = data.model_dump(exclude={"password", "email"})
        user = User(
            **values,
            email=email,
            password_hash=get_password_hash(data.password),
            status=UserStatus.active,
            created_by=actor.user_id if actor else None,
        )
        self.db.add(user)
        self._commit("create user", entity="User", unique_field="email", value=email)
        self.db.refresh(user)
        logger.info("User %s created (%s)", user.id, user.role.value)
        return user

    def update(self, user_id: int, data: UserUpdate, actor: Actor) -> User:
        user = self.get(user_id)
        changes = data.model_dump(exclude_unset=True)

        if "status" in changes and not actor.is_admin:
            raise ForbiddenError("Only an Admin can change account status")

        # role changes follow their own policy and run first, so a refused
        # role change leaves the rest of the profile untouched
        role = changes.pop("role", None)
        if role is not None and role != user.role:
            user = self.update_role(actor, user_id, role)

        if changes.get("email") is not None:
            changes["email"] = changes["email"].strip().lower()
            self._ensure_email_free(changes["email"], exclude_id=user_id)
        if "branch_id" in changes:
            self._check_branch(changes["branch_id"])
        if "password" in changes:
            password = changes.pop("password")
            if password:
                changes["password_hash"] = get_password_hash(password)

        changed = apply_partial_update(
            user, changes, required=("email", "first_name", "last_name", "status", "password_hash")
        )
        if changed:
            user.last_updated_by = actor.user_id
            self._commit("update user", entity="User", unique_field="email", value=user.email)
            self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> int:
        user = self.get(user_id)
        self.db.delete(user)
        self._commit("delete user")
        logger.info("User %s deleted", user_id)
        return user_id

    def update_role(self, requester: Actor, target_id: int, desired_role: UserRole) -> User:
        """
        An Admin may set any role. A Lawyer may only grant Admin, and only
        while the firm has no Admin yet. The no-Admin check and the write are
        one UPDATE statement, so two concurrent bootstrap promotions cannot
        both succeed.
        """
        desired_role = UserRole(desired_role)
        stmt = (
            update(User)
            .where(User.id == target_id)
            .values(role=desired_role, last_updated_by=requester.user_id)
            .execution_options(synchronize_session=False)
        )
        if requester.is_admin:
            pass
        elif requester.is_lawyer and desired_role == UserRole.admin:
            existing_admin = aliased(User)
            stmt = stmt.where(~exists().where(existing_admin.role == UserRole.admin))
        else:
            raise ForbiddenError("You are not allowed to change user roles")

        result = self.db.execute(stmt)
        if result.rowcount == 0:
            self.db.rollback()
            self.get(target_id)
            raise ForbiddenError("An Admin already exists")
        self._commit("update user role")

        user = self.get(target_id)
        self.db.refresh(user)
        logger.info("User %s role set to %s by user %s", target_id, desired_role.value, requester.user_id)
        return user

    # ------------------------------------------------------------------
    # Login trail
    # ------------------------------------------------------------------

    def record_log(self, user: User, action: str, ip_address: Optional[str] = None) -> UserLog:
        entry = UserLog(
            user_id=user.id,
            action=action,
            ip_address=ip_address,
            user_fullname=user.full_name,
            user_profile=user.profile_image,
        )
        self.db.add(entry)
        if action == "Login":
            user.last_login_at = datetime.utcnow()
        self._commit(f"record {action.lower()}")
        return entry

    def list_logs(self) -> List[UserLog]:
        return self.db.query(UserLog).order_by(UserLog.created_at.desc(), UserLog.id.desc()).all()

    def logs_for_user(self, user_id: int) -> List[UserLog]:
        return (
            self.db.query(UserLog)
            .filter(UserLog.user_id == user_id)
            .order_by(UserLog.created_at.desc(), UserLog.id.desc())
            .all()
        )

    def lawyer_specializations(self) -> List[dict]:
        """Distinct (category, lawyer) pairs taken from the cases lawyers own"""
        rows = (
            self.db.query(
                CaseCategory.id,
                CaseCategory.name,
                User.id,
                User.first_name,
                User.middle_name,
                User.last_name,
            )
            .join(Case, Case.category_id == CaseCategory.id)
            .join(User, Case.user_id == User.id)
            .filter(User.role == UserRole.lawyer)
            .distinct()
            .order_by(CaseCategory.name.asc(), User.last_name.asc())
            .all()
        )
        return [
            {
                "category_id": category_id,
                "category_name": category_name,
                "user_id": user_id,
                "first_name": first_name,
                "middle_name": middle_name,
                "last_name": last_name,
            }
            for category_id, category_name, user_id, first_name, middle_name, last_name in rows
        ]
