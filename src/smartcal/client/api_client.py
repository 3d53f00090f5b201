"""HTTP client for the SmartCal REST API."""

import base64
import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

import httpx

from smartcal.client.session import ApiSession
from smartcal.domain.errors import SmartCalError

_logger = logging.getLogger(__name__)


class ApiRequestError(SmartCalError):
    """Raised when the API answers with an error status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class SmartCalClient:
    """HTTPX-backed API client that authenticates with an ``ApiSession``."""

    base_url: str
    session: ApiSession
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, base_url: str, session: ApiSession | None = None
    ) -> "SmartCalClient":
        """Create an API client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            session=session or ApiSession(),
            http_client=httpx.AsyncClient(),
        )

    async def signup(
        self,
        username: str,
        email: str,
        password: str,
        daily_calorie_target: int | None = None,
    ) -> dict[str, object]:
        """Create an account and sign in with it."""
        payload: dict[str, object] = {
            "username": username,
            "email": email,
            "password": password,
        }
        if daily_calorie_target is not None:
            payload["dailyCalorieTarget"] = daily_calorie_target
        data = await self._request("POST", "/api/auth/signup", json=payload)
        self.session.login(str(data["token"]), data["user"])
        return data["user"]

    async def login(self, username: str, password: str) -> dict[str, object]:
        """Sign in with a username or email."""
        data = await self._request(
            "POST",
            "/api/auth/login",
            json={"username": username, "password": password},
        )
        self.session.login(str(data["token"]), data["user"])
        return data["user"]

    def logout(self) -> None:
        self.session.logout()

    async def verify(self) -> dict[str, object] | None:
        """Confirm the stored token; a rejected token signs the session out."""
        if not self.session.is_authenticated:
            return None
        try:
            data = await self._request("GET", "/api/auth/verify")
        except ApiRequestError as exc:
            if exc.status_code == httpx.codes.UNAUTHORIZED:
                _logger.info("Stored token rejected, logging out")
                self.session.logout()
                return None
            raise
        self.session.user = dict(data["user"])
        return data["user"]

    async def update_profile(self, **changes: object) -> dict[str, object]:
        """Update the profile; keys are wire names such as ``dailyCalorieTarget``."""
        data = await self._request("PUT", "/api/auth/profile", json=changes)
        self.session.user = dict(data["user"])
        return data["user"]

    async def list_meals(self) -> list[dict[str, object]]:
        data = await self._request("GET", "/api/meals")
        return data["logs"]

    async def list_meals_by_date(
        self, start: date | None = None, end: date | None = None
    ) -> list[dict[str, object]]:
        params = {}
        if start:
            params["startDate"] = start.isoformat()
        if end:
            params["endDate"] = end.isoformat()
        data = await self._request("GET", "/api/meals/by-date", params=params)
        return data["logs"]

    async def get_meal(self, meal_log_id: UUID | str) -> dict[str, object]:
        data = await self._request("GET", f"/api/meals/{meal_log_id}")
        return data["log"]

    async def create_meal(self, payload: dict[str, object]) -> dict[str, object]:
        data = await self._request("POST", "/api/meals", json=payload)
        return data["log"]

    async def update_meal(
        self, meal_log_id: UUID | str, payload: dict[str, object]
    ) -> dict[str, object]:
        data = await self._request("PUT", f"/api/meals/{meal_log_id}", json=payload)
        return data["log"]

    async def delete_meal(self, meal_log_id: UUID | str) -> None:
        await self._request("DELETE", f"/api/meals/{meal_log_id}")

    async def recent_week(self) -> list[dict[str, object]]:
        data = await self._request("GET", "/api/meals/stats/weekly")
        return data["stats"]

    async def daily_stats(
        self, start: date | None = None, end: date | None = None
    ) -> list[dict[str, object]]:
        params = {}
        if start:
            params["startDate"] = start.isoformat()
        if end:
            params["endDate"] = end.isoformat()
        data = await self._request("GET", "/api/stats/daily", params=params)
        return data["stats"]

    async def weekly_stats(
        self, start: date | None = None, end: date | None = None
    ) -> list[dict[str, object]]:
        params = {}
        if start:
            params["startWeek"] = start.isoformat()
        if end:
            params["endWeek"] = end.isoformat()
        data = await self._request("GET", "/api/stats/weekly", params=params)
        return data["stats"]

    async def refresh_stats(self) -> dict[str, object]:
        return await self._request("POST", "/api/stats/update")

    async def parse_food(self, text: str) -> list[dict[str, object]]:
        """Ask the server to turn meal text into food items."""
        data = await self._request("POST", "/api/foods/parse", json={"text": text})
        return data["items"]

    async def analyze_image(self, image_bytes: bytes) -> dict[str, object]:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        return await self._request(
            "POST", "/api/foods/analyze-image", json={"image": encoded}
        )

    async def insights(self) -> str:
        data = await self._request("POST", "/api/insights")
        return str(data["insight"])

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, object] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, object]:
        response = await self.http_client.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params=params,
            headers=self.session.auth_headers(),
            timeout=self.timeout,
        )
        if response.is_error:
            raise ApiRequestError(response.status_code, _error_message(response))
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase
