"""Domain models for users."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    """Access level of a user."""

    USER = "USER"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    username: str
    email: str
    role: UserRole
    daily_calorie_target: int


@dataclass(frozen=True)
class StoredUser:
    """User row together with its password hash."""

    user: UserRecord
    password_hash: str
