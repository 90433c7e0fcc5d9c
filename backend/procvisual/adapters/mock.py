"""Mock email adapter for development and tests without API calls."""
import logging
import uuid
from collections import deque
from typing import Any, Deque, Dict

from procvisual.adapters.base import EmailAdapter
from procvisual.utils.privacy import mask_email

logger = logging.getLogger(__name__)

OUTBOX_LIMIT = 100


class MockEmailAdapter(EmailAdapter):
    """Keeps the most recent sent messages in memory instead of delivering them."""

    # Shared outbox so tests can inspect what the app sent; oldest messages drop off
    outbox: Deque[Dict[str, Any]] = deque(maxlen=OUTBOX_LIMIT)

    def __init__(self, provider_id: str = "mock", **kwargs):
        super().__init__(provider_id, **kwargs)

    async def send(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        message = {"id": str(uuid.uuid4()), "to": to, "subject": subject, "html": html}
        MockEmailAdapter.outbox.append(message)
        logger.info("Mock email queued", extra={"to": mask_email(to), "subject": subject})
        return {"id": message["id"]}

    @classmethod
    def clear(cls) -> None:
        cls.outbox.clear()
