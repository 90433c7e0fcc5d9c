"""Domain exceptions mapped to HTTP responses in ``procvisual.main``."""
from typing import Optional


class ProcVisualError(Exception):
    """Base class for application errors."""

    status_code = 500
    message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(ProcVisualError):
    status_code = 400
    message = "Missing required fields"


class DuplicateEmailError(ProcVisualError):
    status_code = 400
    message = "Email already registered"


class InvalidCredentialsError(ProcVisualError):
    status_code = 401
    message = "Invalid email or password"


class NotAuthenticatedError(ProcVisualError):
    status_code = 401
    message = "Not authenticated"


class PaywallError(ProcVisualError):
    status_code = 402
    message = "Lifetime access required"


class TransactionNotFoundError(ProcVisualError):
    status_code = 404
    message = "Transaction not found"


class PaymentError(ProcVisualError):
    status_code = 502
    message = "Payment provider returned an error"


class PaymentUnavailableError(ProcVisualError):
    status_code = 503
    message = "Payments are not configured"
