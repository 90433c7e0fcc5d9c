"""Stripe Checkout integration for lifetime access."""
import logging
from typing import Optional

import httpx

from procvisual.config import settings
from procvisual.exceptions import PaymentError, PaymentUnavailableError
from procvisual.storage.database import UserStore
from procvisual.utils.privacy import mask_email

logger = logging.getLogger(__name__)


class CheckoutService:
    """Creates Stripe Checkout sessions and records lifetime access."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        price_id: Optional[str] = None,
        api_base: Optional[str] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.stripe_secret_key
        self.price_id = price_id if price_id is not None else settings.stripe_price_id
        self.api_base = api_base or settings.stripe_api_base

    async def create_checkout_session(self, email: str) -> str:
        """
        Create a one-off payment Checkout session for a user.

        Args:
            email: Customer email, pre-filled on the checkout page

        Returns:
            Redirect URL of the hosted checkout page

        Raises:
            PaymentUnavailableError: If Stripe keys are not configured
            PaymentError: If Stripe is unreachable or rejects the request
        """
        if not self.secret_key or not self.price_id:
            raise PaymentUnavailableError()

        form = {
            "mode": "payment",
            "customer_email": email,
            "line_items[0][price]": self.price_id,
            "line_items[0][quantity]": "1",
            "success_url": settings.stripe_success_url,
            "cancel_url": settings.stripe_cancel_url,
            "metadata[user_email]": email,
        }
        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
                resp = await client.post(
                    f"{self.api_base}/checkout/sessions",
                    data=form,
                    auth=(self.secret_key, ""),
                )
        except httpx.HTTPError as e:
            logger.error("Stripe unreachable: %s", e)
            raise PaymentError("Payment provider is unreachable") from e

        if resp.status_code != 200:
            logger.error("Stripe API error %s: %s", resp.status_code, resp.text[:200])
            raise PaymentError()

        url = resp.json().get("url")
        if not url:
            raise PaymentError("Stripe session URL not found")
        logger.info("Checkout session created", extra={"email": mask_email(email)})
        return url

    async def is_paid(self, session_id: str, email: str) -> bool:
        """
        Check that a Checkout session was paid by this user.

        Raises:
            PaymentUnavailableError: If Stripe keys are not configured
            PaymentError: If Stripe is unreachable or rejects the request
        """
        if not self.secret_key:
            raise PaymentUnavailableError()

        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
                resp = await client.get(
                    f"{self.api_base}/checkout/sessions/{session_id}",
                    auth=(self.secret_key, ""),
                )
        except httpx.HTTPError as e:
            logger.error("Stripe unreachable: %s", e)
            raise PaymentError("Payment provider is unreachable") from e

        if resp.status_code != 200:
            logger.error("Stripe API error %s: %s", resp.status_code, resp.text[:200])
            raise PaymentError()

        data = resp.json()
        paid_by = (data.get("metadata") or {}).get("user_email") or data.get("customer_email")
        return data.get("payment_status") == "paid" and paid_by == email

    @staticmethod
    def mark_lifetime_access(user_store: UserStore, email: str) -> bool:
        """Flip the lifetime access flag after a completed checkout."""
        updated = user_store.set_lifetime_access(email, True)
        logger.info("Lifetime access granted", extra={"email": mask_email(email), "updated": updated})
        return updated
