"""
Authentication endpoints

Unverified accounts get a one-time code by email on login and exchange it
for a token at /verify-2fa.
"""
from typing import Union

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from legal_vault.api.v1.deps import get_auth_service, get_current_user, get_user_service
from legal_vault.core.logger import logger
from legal_vault.db.models import User
from legal_vault.db.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    OtpChallengeResponse,
    ResendOtpRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserResponse,
    VerifyOtpRequest,
)
from legal_vault.services.auth_service import AuthService
from legal_vault.services.notifier_service import NotifierService, get_notifier
from legal_vault.services.user_service import UserService
from legal_vault.utils.exceptions import ValidationError
from legal_vault.utils.helpers import client_ip

router = APIRouter()


def _token_response(auth: AuthService, user: User) -> TokenResponse:
    return TokenResponse(access_token=auth.token_for(user), user=UserResponse.model_validate(user))


@router.post("/login", response_model=Union[TokenResponse, OtpChallengeResponse])
def login(
    body: LoginRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    auth: AuthService = Depends(get_auth_service),
    users: UserService = Depends(get_user_service),
    notifier: NotifierService = Depends(get_notifier),
):
    """Login endpoint. Unverified users receive a verification code instead of a token."""
    user = auth.authenticate(body.email, body.password)

    if not user.is_verified:
        otp = auth.issue_otp(user)
        background_tasks.add_task(notifier.send_otp, user.email, otp)
        return OtpChallengeResponse(message="Verification code sent to your email", user_id=user.id)

    users.record_log(user, "Login", client_ip(request))
    logger.info("User %s logged in", user.id)
    return _token_response(auth, user)


@router.post("/verify-2fa", response_model=TokenResponse)
def verify_2fa(
    body: VerifyOtpRequest,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    users: UserService = Depends(get_user_service),
):
    user = auth.verify_otp(body.user_id, body.code)
    users.record_log(user, "Login", client_ip(request))
    return _token_response(auth, user)


@router.post("/resend-otp", response_model=MessageResponse)
def resend_otp(
    body: ResendOtpRequest,
    background_tasks: BackgroundTasks,
    auth: AuthService = Depends(get_auth_service),
    users: UserService = Depends(get_user_service),
    notifier: NotifierService = Depends(get_notifier),
):
    user = users.get(body.user_id)
    if user.is_verified:
        raise ValidationError("Account is already verified", field="user_id")
    otp = auth.issue_otp(user)
    background_tasks.add_task(notifier.send_otp, user.email, otp)
    return {"message": "Verification code sent to your email"}


@router.get("/verify", response_model=UserResponse)
def verify_session(current_user: User = Depends(get_current_user)):
    """Session check: returns the user behind the bearer token"""
    return current_user


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    current_user: User = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    """Stateless JWT: the client drops the token, the server only logs the event"""
    users.record_log(current_user, "Logout", client_ip(request))
    return {"message": "Logged out successfully"}


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    body: ForgotPasswordRequest,
    background_tasks: BackgroundTasks,
    auth: AuthService = Depends(get_auth_service),
    notifier: NotifierService = Depends(get_notifier),
):
    """
    Request password reset. Always returns success to prevent email enumeration.
    """
    issued = auth.issue_reset_token(body.email)
    if issued:
        user, token = issued
        background_tasks.add_task(notifier.send_password_reset, user.email, token)

    return {"message": "If an account exists with this email, you will receive reset instructions."}


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(body: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service)):
    auth.reset_password(body.token, body.new_password)
    return {"message": "Your password has been reset. You can sign in now."}
