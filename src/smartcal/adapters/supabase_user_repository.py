"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from smartcal.domain.users import StoredUser, UserRecord, UserRole
from smartcal.services.auth import UserRepository

_USER_COLUMNS = "id, username, email, role, daily_calorie_target"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id, if present."""
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_user(response.data[0])

    def find_by_login(self, identifier: str) -> StoredUser | None:
        """Return the user whose username or email matches."""
        for column in ("username", "email"):
            response = (
                self.client.table("users")
                .select(f"{_USER_COLUMNS}, password_hash")
                .eq(column, identifier)
                .limit(1)
                .execute()
            )
            if response.data:
                row = response.data[0]
                return StoredUser(
                    user=_parse_user(row), password_hash=str(row["password_hash"])
                )
        return None

    def is_taken(
        self, username: str | None, email: str | None, exclude_id: UUID | None = None
    ) -> bool:
        """Return True when another user holds the username or email."""
        for column, value in (("username", username), ("email", email)):
            if not value:
                continue
            response = (
                self.client.table("users").select("id").eq(column, value).execute()
            )
            for row in response.data or []:
                if exclude_id is None or str(row["id"]) != str(exclude_id):
                    return True
        return False

    def create_user(  # noqa: PLR0913
        self,
        username: str,
        email: str,
        password_hash: str,
        role: UserRole,
        daily_calorie_target: int,
    ) -> UserRecord:
        """Create a new user row and return it."""
        response = (
            self.client.table("users")
            .insert(
                {
                    "username": username,
                    "email": email,
                    "password_hash": password_hash,
                    "role": role.value,
                    "daily_calorie_target": daily_calorie_target,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def update_user(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        """Update a user row and return it."""
        response = (
            self.client.table("users").update(changes).eq("id", str(user_id)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user in Supabase")
        return _parse_user(response.data[0])

    def list_users(self) -> list[UserRecord]:
        """Return all users ordered by username."""
        response = (
            self.client.table("users").select(_USER_COLUMNS).order("username").execute()
        )
        return [_parse_user(row) for row in response.data or []]


def _parse_user(row: dict[str, object]) -> UserRecord:
    return UserRecord(
        id=UUID(str(row["id"])),
        username=str(row["username"]),
        email=str(row.get("email") or ""),
        role=UserRole(row.get("role") or UserRole.USER.value),
        daily_calorie_target=int(row.get("daily_calorie_target") or 2000),
    )
