"""Authentication and user profile models."""
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    """Sign-up form. Fields are optional here so missing ones get a friendly 400."""

    name: Optional[str] = None
    contact: Optional[str] = Field(None, description="Phone or other contact")
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordResetRequest(BaseModel):
    email: str


class UserPublic(BaseModel):
    name: str
    email: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserPublic
    lifetime_access: bool = False


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class UserProfile(BaseModel):
    """Stored user profile."""

    id: int
    name: str
    email: str
    contact: Optional[str] = None
    password_hash: str
    lifetime_access: bool = False


class UserDataPayload(BaseModel):
    """Free-form extra user data (settings, history, preferences)."""

    data: Dict[str, Any] = Field(default_factory=dict)


class DismissAlertRequest(BaseModel):
    key: str = Field(..., min_length=1)


class GoalRequest(BaseModel):
    monthly_target: Decimal = Field(..., ge=0)


class CheckoutResponse(BaseModel):
    url: str
