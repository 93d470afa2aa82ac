import json
from collections.abc import Callable
from typing import Any, Final

import httpx

from ..constants import TOKEN_KEY, USER_KEY
from ..logging_config import get_logger
from .storage import KeyValueStore

logger: Final = get_logger(__name__)

LOGIN_LOCATION: Final = "/"


class ClientSession:
    """Client-side authentication state plus a bearer-token request wrapper.

    The token and the user profile live in `storage` under the ``token`` and
    ``user`` keys. They are written together by `start_session` and removed
    together by `logout`.

    Args:
        storage: Key-value store holding the session entries
        client: HTTP client used for every request
        navigate: Called with the login location after logout
    """

    def __init__(
        self,
        storage: KeyValueStore,
        client: httpx.AsyncClient,
        navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.storage = storage
        self.client = client
        self._navigate = navigate
        self.location: str | None = None

    def is_authenticated(self) -> bool:
        return self.storage.get(TOKEN_KEY) is not None

    def get_token(self) -> str | None:
        return self.storage.get(TOKEN_KEY)

    def get_user(self) -> dict[str, Any] | None:
        """Return the stored profile, or None if it is absent or unreadable.

        A stored value that parses as JSON but not as an object (a list, a
        number, ``null``) counts as corrupted and is also reported as None.
        """
        raw = self.storage.get(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored user profile is not valid JSON")
            return None
        if not isinstance(user, dict):
            return None
        return user

    def start_session(self, token: str, user: dict[str, Any]) -> None:
        self.storage.set(TOKEN_KEY, token)
        self.storage.set(USER_KEY, json.dumps(user))

    def logout(self) -> None:
        """Forget the token and profile, then go back to the login page."""
        self.storage.remove(TOKEN_KEY)
        self.storage.remove(USER_KEY)
        self.location = LOGIN_LOCATION
        if self._navigate is not None:
            self._navigate(LOGIN_LOCATION)

    async def authenticated_fetch(
        self,
        url: httpx.URL | str,
        *,
        method: str = "GET",
        headers: httpx.Headers | dict[str, str] | None = None,
        **options: Any,
    ) -> httpx.Response | None:
        """Send a request carrying ``Authorization: Bearer <token>``.

        Caller headers are kept; the authorization header always wins. Extra
        keyword arguments go straight to `httpx.AsyncClient.request`.

        Returns:
            The response, or None when there is no token or the server
            answered 401. Both cases log the user out.

        Raises:
            httpx.RequestError: If the request could not be sent or answered
        """
        token = self.get_token()
        if not token:
            self.logout()
            return None

        merged_headers = httpx.Headers(headers)
        merged_headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self.client.request(
                method, url, headers=merged_headers, **options
            )
        except httpx.RequestError as e:
            logger.error("API request failed", url=str(url), error=str(e))
            raise

        if response.status_code == httpx.codes.UNAUTHORIZED:
            # Token expired or invalid
            self.logout()
            return None

        return response

    async def sign_in(
        self, url: httpx.URL | str, email: str, password: str
    ) -> dict[str, Any] | None:
        """Log in against the auth routes and store the returned session.

        Returns:
            The user profile, or None if the credentials were rejected
        """
        response = await self.client.post(
            url, json={"email": email, "password": password}
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            self.show_notification("Incorrect email or password", "error")
            return None
        response.raise_for_status()

        body = response.json()
        self.start_session(body["token"], body["user"])
        return body["user"]

    def show_notification(self, message: str, level: str = "info") -> None:
        # Placeholder until there is a UI layer to display toasts
        logger.info(f"[{level.upper()}] {message}")
