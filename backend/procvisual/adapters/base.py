"""Base email adapter interface."""
from abc import ABC, abstractmethod
from typing import Any, Dict


class EmailAdapter(ABC):
    """Abstract base class for transactional email providers."""

    def __init__(self, provider_id: str, **kwargs):
        """
        Initialize the adapter.

        Args:
            provider_id: Identifier for the provider (e.g., "resend", "mock")
            **kwargs: Additional provider-specific configuration
        """
        self.provider_id = provider_id
        self.config = kwargs

    @abstractmethod
    async def send(
        self,
        to: str,
        subject: str,
        html: str,
    ) -> Dict[str, Any]:
        """
        Send one email.

        Args:
            to: Recipient address
            subject: Subject line
            html: HTML body

        Returns:
            Provider response (at least an "id" key)

        Raises:
            RuntimeError: If the provider rejects the message or is unreachable
        """
        pass
