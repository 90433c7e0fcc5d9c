from .base import EmailAdapter
from .mock import MockEmailAdapter
from .resend_adapter import ResendEmailAdapter
from .factory import get_email_adapter

__all__ = [
    "EmailAdapter",
    "MockEmailAdapter",
    "ResendEmailAdapter",
    "get_email_adapter",
]
