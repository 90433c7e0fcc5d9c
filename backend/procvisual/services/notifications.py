"""Transactional email notifications (fire-and-forget)."""
import logging
from typing import Optional

from procvisual.adapters.base import EmailAdapter
from procvisual.adapters.factory import get_email_adapter
from procvisual.config import settings
from procvisual.utils.privacy import mask_email

logger = logging.getLogger(__name__)

WELCOME_SUBJECT = "Welcome to ProcVisual"
PASSWORD_RESET_SUBJECT = "ProcVisual password reset"


class NotificationService:
    """Sends welcome and password-reset emails. Delivery failures never reach the user."""

    def __init__(self, adapter: Optional[EmailAdapter] = None, provider_id: Optional[str] = None):
        self._adapter = adapter
        self.provider_id = provider_id or settings.email_provider

    def _get_adapter(self) -> EmailAdapter:
        if self._adapter is None:
            self._adapter = get_email_adapter(self.provider_id)
        return self._adapter

    async def _deliver(self, to: str, subject: str, html: str) -> bool:
        try:
            adapter = self._get_adapter()
            await adapter.send(to, subject, html)
        except Exception as e:
            logger.error("Email delivery failed", extra={"to": mask_email(to), "subject": subject, "error": str(e)})
            return False
        logger.info("Email sent", extra={"to": mask_email(to), "subject": subject})
        return True

    async def send_welcome(self, to: str, name: str) -> bool:
        html = (
            f"<p>Hi {name},</p>"
            "<p>Your ProcVisual account is ready. Start by adding your first transaction.</p>"
        )
        return await self._deliver(to, WELCOME_SUBJECT, html)

    async def send_password_reset(self, to: str) -> bool:
        html = (
            "<p>We received a request to reset your ProcVisual password.</p>"
            "<p>If this was not you, you can ignore this email.</p>"
        )
        return await self._deliver(to, PASSWORD_RESET_SUBJECT, html)
