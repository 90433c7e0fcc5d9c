"""Authentication: password hashing, sign-up/login and in-memory sessions."""
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Set

import bcrypt

from procvisual.config import settings
from procvisual.exceptions import (
    InvalidCredentialsError,
    NotAuthenticatedError,
    ValidationError,
)
from procvisual.models.auth import SignupRequest, UserProfile
from procvisual.storage.database import UserStore
from procvisual.utils.privacy import mask_email

logger = logging.getLogger(__name__)

LOGIN = "login"
LOGOUT = "logout"


class PasswordHasher:
    """bcrypt hashing and verification."""

    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Invalid hash format
            return False


@dataclass
class SessionContext:
    """
    Everything the request handlers know about the logged-in user.

    Passed explicitly into the dashboard computations; dismissed alerts and
    the savings goal live here and are lost on logout.
    """

    token: str
    owner_id: str
    name: str
    lifetime_access: bool = False
    expires_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc) + timedelta(hours=24))
    dismissed_alerts: Set[str] = field(default_factory=set)
    monthly_goal: Optional[Decimal] = None

    @property
    def expired(self) -> bool:
        return datetime.now(timezone.utc) >= self.expires_at


SessionListener = Callable[[str, SessionContext], None]


class SessionRegistry:
    """Token -> SessionContext map with login/logout observers."""

    def __init__(self, ttl_hours: int = 24):
        self.ttl = timedelta(hours=ttl_hours)
        self._sessions: Dict[str, SessionContext] = {}
        self._listeners: List[SessionListener] = []

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a login/logout listener; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, event: str, session: SessionContext) -> None:
        for listener in list(self._listeners):
            listener(event, session)

    def __len__(self) -> int:
        return len(self._sessions)

    def purge_expired(self) -> int:
        """Close every expired session. Returns how many were dropped."""
        expired = [token for token, session in self._sessions.items() if session.expired]
        for token in expired:
            self.close(token)
        return len(expired)

    def open(self, user: UserProfile) -> SessionContext:
        self.purge_expired()
        session = SessionContext(
            token=secrets.token_urlsafe(32),
            owner_id=user.email,
            name=user.name,
            lifetime_access=user.lifetime_access,
            expires_at=datetime.now(timezone.utc) + self.ttl,
        )
        self._sessions[session.token] = session
        self._notify(LOGIN, session)
        return session

    def get(self, token: str) -> SessionContext:
        session = self._sessions.get(token)
        if session is None:
            raise NotAuthenticatedError()
        if session.expired:
            self.close(token)
            raise NotAuthenticatedError("Session expired")
        return session

    def close(self, token: str) -> bool:
        session = self._sessions.pop(token, None)
        if session is None:
            return False
        self._notify(LOGOUT, session)
        return True

    def clear(self) -> None:
        self._sessions.clear()


class AuthService:
    """Sign-up, login and logout against the user store."""

    def __init__(
        self,
        sessions: SessionRegistry,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.sessions = sessions
        self.hasher = hasher or PasswordHasher(rounds=settings.bcrypt_rounds)

    def signup(self, user_store: UserStore, request: SignupRequest) -> UserProfile:
        """
        Register a new user.

        Raises:
            ValidationError: If name, email or password is missing
            DuplicateEmailError: If the email is already registered
        """
        name = (request.name or "").strip()
        email = (request.email or "").strip().lower()
        if not name or not email or not request.password:
            raise ValidationError()

        logger.info("Signup attempt", extra={"email": mask_email(email)})
        return user_store.create_user(
            name=name,
            email=email,
            contact=request.contact,
            password_hash=self.hasher.hash(request.password),
        )

    def login(self, user_store: UserStore, email: str, password: str) -> SessionContext:
        """
        Check credentials and open a session.

        Raises:
            InvalidCredentialsError: On unknown email or wrong password
        """
        email = (email or "").strip().lower()
        logger.info("Login attempt", extra={"email": mask_email(email)})
        user = user_store.get_by_email(email)
        if user is None or not self.hasher.verify(password or "", user.password_hash):
            raise InvalidCredentialsError()
        return self.sessions.open(user)

    def logout(self, token: str) -> bool:
        return self.sessions.close(token)
