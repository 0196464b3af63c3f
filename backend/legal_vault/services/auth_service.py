"""
Login, one-time codes and password resets
"""
from datetime import datetime, timedelta
from typing import Optional, Tuple

from legal_vault.core.config import settings
from legal_vault.core.logger import logger
from legal_vault.core.security import (
    create_access_token,
    generate_otp,
    generate_reset_token,
    get_password_hash,
    verify_password,
)
from legal_vault.db.models import User, UserStatus
from legal_vault.services.base import BaseService
from legal_vault.services.user_service import UserService
from legal_vault.utils.exceptions import ForbiddenError, UnauthorizedError, ValidationError
from legal_vault.utils.helpers import mask_email


class AuthService(BaseService):

    def __init__(self, db):
        super().__init__(db)
        self.users = UserService(db)

    @staticmethod
    def token_for(user: User) -> str:
        return create_access_token(
            data={"sub": str(user.id), "user_id": user.id, "role": user.role.value},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def authenticate(self, email: str, password: str) -> User:
        user = self.users.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", mask_email(email))
            raise UnauthorizedError("Incorrect email or password")
        if user.status == UserStatus.suspended:
            raise ForbiddenError("Account is suspended")
        return user

    def issue_otp(self, user: User) -> str:
        otp = generate_otp()
        user.otp_code = otp
        user.otp_expires_at = datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRY_MINUTES)
        self._commit("issue OTP")
        return otp

    def verify_otp(self, user_id: int, code: str) -> User:
        user = self.users.get(user_id)
        if not user.otp_code or not user.otp_expires_at:
            raise ValidationError("No verification code was requested", field="code")
        if user.otp_expires_at < datetime.utcnow():
            raise ValidationError("Verification code has expired", field="code")
        if user.otp_code != code.strip():
            raise UnauthorizedError("Invalid verification code")

        user.is_verified = True
        user.otp_code = None
        user.otp_expires_at = None
        self._commit("verify OTP")
        self.db.refresh(user)
        logger.info("User %s verified", user.id)
        return user

    def issue_reset_token(self, email: str) -> Optional[Tuple[User, str]]:
        """Returns None for unknown emails; callers must not reveal the difference."""
        user = self.users.get_by_email(email)
        if not user:
            return None
        token = generate_reset_token()
        user.password_reset_token = token
        user.password_reset_token_expiry = datetime.utcnow() + timedelta(
            minutes=settings.RESET_TOKEN_EXPIRY_MINUTES
        )
        self._commit("issue password reset token")
        return user, token

    def reset_password(self, token: str, new_password: str) -> User:
        user = (
            self.db.query(User)
            .filter(
                User.password_reset_token == token.strip(),
                User.password_reset_token_expiry > datetime.utcnow(),
            )
            .first()
        )
        if not user:
            raise ValidationError("Invalid or expired reset link. Please request a new one.", field="token")

        user.password_hash = get_password_hash(new_password)
        user.password_reset_token = None
        user.password_reset_token_expiry = None
        self._commit("reset password")
        logger.info("Password reset for user %s", user.id)
        return user
