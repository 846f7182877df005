"""
Transport gateway: the single outbound HTTP client.

Attaches the cached bearer token to every request and, on a 401, clears the
token and notifies the registered unauthorized-listeners before raising.
Everything else is passed back to the caller as parsed JSON or a
TransportFailure.
"""

from typing import Any, Callable, Optional
import httpx
from clinic_client.config import get_settings
from clinic_client.exceptions import AuthFailure, TransportFailure
from clinic_client.services.storage import CredentialStore, MemoryCache
from clinic_client.utils.logger import get_logger

logger = get_logger("api")

UnauthorizedListener = Callable[[], None]


def _server_message(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error body, if the server sent one."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()[:300]
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return ""


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        credentials: Optional[CredentialStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.credentials = credentials or CredentialStore(MemoryCache())
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._unauthorized_listeners: list[UnauthorizedListener] = []

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -- credential cache ------------------------------------------------

    def get_token(self) -> Optional[str]:
        return self.credentials.load()

    def set_token(self, token: str) -> None:
        self.credentials.save(token)

    def clear_token(self) -> None:
        self.credentials.clear()

    # -- unauthorized event ----------------------------------------------

    def on_unauthorized(self, listener: UnauthorizedListener) -> None:
        self._unauthorized_listeners.append(listener)

    def _handle_unauthorized(self) -> None:
        self.clear_token()
        for listener in list(self._unauthorized_listeners):
            listener()

    # -- requests ----------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        token: Optional[str] = None,
    ) -> Any:
        headers = {}
        bearer = token or self.get_token()
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        try:
            response = await self.client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out after %ss", method, path, self.timeout)
            raise TransportFailure(f"Request timed out after {self.timeout:g}s") from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransportFailure(f"Network error: {e}") from e

        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.status_code == 401:
            logger.warning("%s %s rejected credentials; resetting session", method, path)
            message = _server_message(response)
            self._handle_unauthorized()
            raise AuthFailure(message, code="invalid-credentials", status_code=401)

        if response.status_code >= 400:
            message = _server_message(response)
            logger.warning("%s %s -> %s %s", method, path, response.status_code, message)
            raise TransportFailure(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportFailure("Server returned a non-JSON response", status_code=response.status_code) from e

    async def get(self, path: str, token: Optional[str] = None) -> Any:
        return await self.request("GET", path, token=token)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
