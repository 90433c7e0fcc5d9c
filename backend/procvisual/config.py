"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "ProcVisual API"
    debug: bool = False
    database_path: str = "procvisual.db"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # "repeat" keeps the full entered amount on every installment,
    # "split" divides it across the installments
    installment_amount_mode: str = "repeat"

    # Gate the dashboard behind the lifetime access flag (paywall)
    require_lifetime_access: bool = False
    session_ttl_hours: int = 24
    bcrypt_rounds: int = 12

    # Payment collaborator (Stripe Checkout)
    stripe_secret_key: str = ""
    stripe_price_id: str = ""
    stripe_api_base: str = "https://api.stripe.com/v1"
    stripe_success_url: str = "http://localhost:3000/?checkout=success"
    stripe_cancel_url: str = "http://localhost:3000/?checkout=cancel"

    # Notification collaborator
    email_provider: str = "mock"
    resend_api_key: str = ""
    resend_api_base: str = "https://api.resend.com"
    email_from: str = "ProcVisual <no-reply@procvisual.app>"

    http_timeout_seconds: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
