"""Authentication state held by API client callers."""

from dataclasses import dataclass, field


@dataclass
class ApiSession:
    """Bearer token and profile of the signed-in user, if any."""

    token: str | None = None
    user: dict[str, object] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str, user: dict[str, object]) -> None:
        """Switch to the authenticated state."""
        self.token = token
        self.user = dict(user)

    def logout(self) -> None:
        """Forget the token and the profile."""
        self.token = None
        self.user = {}

    def auth_headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
