"""Factory for creating email adapters."""
from procvisual.adapters.base import EmailAdapter
from procvisual.adapters.mock import MockEmailAdapter
from procvisual.adapters.resend_adapter import ResendEmailAdapter


def get_email_adapter(provider_id: str, **kwargs) -> EmailAdapter:
    """
    Factory function to create the appropriate email adapter.

    Args:
        provider_id: Provider identifier ("resend", "mock")
        **kwargs: Additional configuration for the adapter

    Returns:
        EmailAdapter instance
    """
    provider = (provider_id or "").lower()
    if provider == "resend":
        return ResendEmailAdapter(provider, **kwargs)
    else:
        # Unknown providers fall back to the in-memory outbox
        return MockEmailAdapter("mock", **kwargs)
