"""Resend transactional email adapter."""
from typing import Any, Dict

import httpx

from procvisual.adapters.base import EmailAdapter
from procvisual.config import settings


class ResendEmailAdapter(EmailAdapter):
    """Resend HTTP API adapter."""

    def __init__(self, provider_id: str = "resend", **kwargs):
        super().__init__(provider_id, **kwargs)
        self.api_key = kwargs.get("api_key") or settings.resend_api_key
        if not self.api_key:
            raise ValueError("Resend API key required")
        self.base_url = kwargs.get("base_url") or settings.resend_api_base
        self.sender = kwargs.get("sender") or settings.email_from
        self.timeout = kwargs.get("timeout") or settings.http_timeout_seconds

    async def send(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        """Send email using the Resend API."""
        payload = {"from": self.sender, "to": [to], "subject": subject, "html": html}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(f"{self.base_url}/emails", json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise RuntimeError(f"Resend API unreachable: {str(e)}") from e

        if resp.status_code >= 300:
            raise RuntimeError(f"Resend API error {resp.status_code}: {resp.text[:200]}")
        return resp.json()
