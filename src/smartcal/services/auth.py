"""Signup, login and bearer-token verification."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from smartcal.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)
from smartcal.domain.users import StoredUser, UserRecord, UserRole

MIN_DAILY_TARGET = 1000
MAX_DAILY_TARGET = 5000

_logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""

    def find_by_login(self, identifier: str) -> StoredUser | None:
        """Return the user whose username or email equals ``identifier``."""

    def is_taken(
        self, username: str | None, email: str | None, exclude_id: UUID | None = None
    ) -> bool:
        """Return True when another user already has the username or email."""

    def create_user(  # noqa: PLR0913
        self,
        username: str,
        email: str,
        password_hash: str,
        role: UserRole,
        daily_calorie_target: int,
    ) -> UserRecord:
        """Create and return a new user record."""

    def update_user(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Apply changes to a user and return the updated record."""

    def list_users(self) -> list[UserRecord]:
        """Return all users."""


@dataclass
class TokenSigner:
    """Issues and checks signed, time-limited bearer tokens."""

    secret_key: str
    max_age_seconds: int
    salt: str = "smartcal-auth"

    def issue(self, user: UserRecord) -> str:
        """Return a token identifying the user."""
        return self._serializer().dumps(
            {
                "user_id": str(user.id),
                "username": user.username,
                "role": user.role.value,
            }
        )

    def read_user_id(self, token: str) -> UUID:
        """Return the user id carried by a valid token."""
        try:
            payload = self._serializer().loads(token, max_age=self.max_age_seconds)
        except SignatureExpired as exc:
            raise AuthenticationError("Token expired") from exc
        except BadSignature as exc:
            raise AuthenticationError("Invalid token") from exc
        try:
            return UUID(str(payload["user_id"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise AuthenticationError("Invalid token") from exc

    def _serializer(self) -> URLSafeTimedSerializer:
        return URLSafeTimedSerializer(self.secret_key, salt=self.salt)


@dataclass(frozen=True)
class AuthSession:
    """A user together with a freshly issued token."""

    user: UserRecord
    token: str


@dataclass
class AuthService:
    """Application service for account lifecycle actions."""

    repository: UserRepository
    tokens: TokenSigner
    default_daily_target: int = 2000

    def signup(
        self,
        username: str,
        email: str,
        password: str,
        daily_calorie_target: int | None = None,
    ) -> AuthSession:
        """Create a USER account and return it with a token."""
        if not username.strip() or not email.strip() or not password:
            raise ValidationFailedError("Username, email, and password are required")
        target = (
            daily_calorie_target
            if daily_calorie_target is not None
            else self.default_daily_target
        )
        _validate_target(target)
        if self.repository.is_taken(username, email):
            raise ConflictError("Username or email already exists")
        user = self.repository.create_user(
            username=username.strip(),
            email=email.strip(),
            password_hash=generate_password_hash(password),
            role=UserRole.USER,
            daily_calorie_target=target,
        )
        _logger.info("Created user %s", user.id)
        return AuthSession(user=user, token=self.tokens.issue(user))

    def login(self, identifier: str, password: str) -> AuthSession:
        """Check credentials given a username or email."""
        if not identifier or not password:
            raise ValidationFailedError("Username and password are required")
        stored = self.repository.find_by_login(identifier.strip())
        if stored is None or not check_password_hash(stored.password_hash, password):
            raise AuthenticationError("Invalid credentials")
        return AuthSession(user=stored.user, token=self.tokens.issue(stored.user))

    def authenticate(self, token: str | None) -> UserRecord:
        """Return the user a bearer token belongs to."""
        if not token:
            raise AuthenticationError("Token required")
        user = self.repository.get_by_id(self.tokens.read_user_id(token))
        if user is None:
            raise AuthenticationError("User not found")
        return user

    def update_profile(
        self,
        user_id: UUID,
        username: str | None = None,
        email: str | None = None,
        daily_calorie_target: int | None = None,
    ) -> UserRecord:
        """Change any of username, email and daily calorie target."""
        current = self.repository.get_by_id(user_id)
        if current is None:
            raise NotFoundError("User not found")
        changes: dict[str, object] = {}
        for field, value in (("username", username), ("email", email)):
            if value is None:
                continue
            if not value.strip():
                raise ValidationFailedError(f"{field.capitalize()} cannot be empty")
            changes[field] = value.strip()
        if daily_calorie_target is not None:
            _validate_target(daily_calorie_target)
            changes["daily_calorie_target"] = daily_calorie_target
        if not changes:
            raise ValidationFailedError("No fields to update")
        if (username is not None or email is not None) and self.repository.is_taken(
            changes.get("username", current.username),
            changes.get("email", current.email),
            exclude_id=user_id,
        ):
            raise ConflictError("Username or email already exists")
        return self.repository.update_user(user_id, changes)


def _validate_target(target: int) -> None:
    if not MIN_DAILY_TARGET <= target <= MAX_DAILY_TARGET:
        raise ValidationFailedError(
            f"Daily calorie target must be between {MIN_DAILY_TARGET} "
            f"and {MAX_DAILY_TARGET}"
        )
