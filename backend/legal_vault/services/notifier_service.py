"""
Outbound email

`dev` logs the message instead of sending it. `resend` posts it to the
Resend API. Sending is fire-and-forget: failures are logged and never
reach the request that triggered them.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

import httpx

from legal_vault.core.config import settings
from legal_vault.core.logger import logger
from legal_vault.utils.helpers import mask_email

RESEND_API_URL = "https://api.resend.com/emails"


class NotifierService:
    """Email sender with a provider toggle."""

    def __init__(self, provider: Optional[str] = None) -> None:
        self.provider = (provider or settings.EMAIL_PROVIDER or "dev").strip().lower()

    def _send_resend(self, recipient: str, subject: str, body: str) -> None:
        api_key = (settings.RESEND_API_KEY or "").strip()
        sender = (settings.EMAIL_FROM or "").strip()
        if not api_key or not sender:
            raise ValueError("Resend email config missing (RESEND_API_KEY/EMAIL_FROM)")
        payload = {
            "from": sender,
            "to": [recipient],
            "subject": subject,
            "text": body,
        }
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        with httpx.Client(timeout=20.0) as client:
            resp = client.post(RESEND_API_URL, json=payload, headers=headers)
            if resp.status_code >= 400:
                raise ValueError(f"Resend email failed: {resp.status_code} {resp.text[:200]}")

    def send(self, recipient: str, subject: str, body: str) -> Dict[str, str]:
        target = (recipient or "").strip()
        if not target:
            logger.warning("Email '%s' dropped: no recipient", subject)
            return {"provider": self.provider, "status": "skipped"}

        if self.provider == "dev":
            logger.info("[DEV EMAIL] to=%s subject=%s body=%s", target, subject, body)
            return {"provider": "dev", "status": "logged"}

        try:
            if self.provider == "resend":
                self._send_resend(target, subject, body)
            else:
                raise ValueError(f"Unsupported EMAIL_PROVIDER: {self.provider}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to send email to %s: %s", mask_email(target), str(e))
            return {"provider": self.provider, "status": "failed"}

        logger.info("Email sent to %s: %s", mask_email(target), subject)
        return {"provider": self.provider, "status": "sent"}

    def send_otp(self, recipient: str, otp: str) -> Dict[str, str]:
        return self.send(
            recipient,
            f"{settings.APP_NAME} verification code",
            f"Your {settings.APP_NAME} verification code is {otp}. "
            f"Valid for {settings.OTP_EXPIRY_MINUTES} minutes.",
        )

    def send_password_reset(self, recipient: str, token: str) -> Dict[str, str]:
        reset_url = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"
        return self.send(
            recipient,
            f"{settings.APP_NAME} password reset",
            f"Reset your password here: {reset_url}\n"
            f"The link expires in {settings.RESET_TOKEN_EXPIRY_MINUTES} minutes.",
        )


@lru_cache()
def get_notifier() -> NotifierService:
    return NotifierService()
