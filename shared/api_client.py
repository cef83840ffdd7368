"""
Typed HTTP client for the HeartBridge backend.

Every backend call goes through APIClient. It resolves paths against the
configured base URL, attaches the stored bearer token, converts field names
between the local camelCase form and the snake_case wire form, and classifies
responses into decoded payloads or APIError subclasses.

Each call runs exactly once: no retries, caching or cancellation.
"""

import logging
from typing import Any, Mapping, Optional, Protocol, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import Settings, get_settings
from .exceptions import DecodingError, InvalidResponseError, InvalidURLError, ServerError
from .models import keys_to_camel, keys_to_snake

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

RequestBody = Union[BaseModel, Mapping[str, Any]]


class TokenSource(Protocol):
    """Anything that can hand out the current bearer token."""

    def get_token(self) -> Optional[str]:
        ...


class APIClient:
    """
    Single chokepoint for all backend calls.

    Construct one per application and inject it into the services and
    screens that need it.
    """

    def __init__(
        self,
        base_url: str,
        token_store: TokenSource,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL every request path is resolved against.
            token_store: Source of the bearer token, read on every call.
            transport: Optional httpx transport (tests inject MockTransport).
            timeout: Optional timeout in seconds. None keeps httpx defaults.
        """
        self._base_url = base_url
        self._token_store = token_store
        self._transport = transport
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get(self, path: str, response_model: Optional[type[T]] = None) -> Any:
        """
        Issue a GET request and decode the response.

        Args:
            path: Path resolved against the base URL (e.g. "/api/auth/me")
            response_model: Model to decode into. If None, the camelCase-keyed
                JSON value is returned.

        Raises:
            APIError: InvalidURLError, InvalidResponseError, ServerError or
                DecodingError
        """
        return await self._request("GET", path, None, response_model)

    async def post(
        self,
        path: str,
        body: Optional[RequestBody] = None,
        response_model: Optional[type[T]] = None,
    ) -> Any:
        """Issue a POST request with a JSON body and decode the response."""
        return await self._request("POST", path, body, response_model)

    def resolve_url(self, path: str) -> httpx.URL:
        """
        Resolve a request path against the base URL.

        Raises:
            InvalidURLError: If the path or base URL cannot be parsed, or the
                result is not an absolute http(s) URL.
        """
        try:
            url = httpx.URL(self._base_url).join(path)
        except (httpx.InvalidURL, TypeError, ValueError):
            raise InvalidURLError(path)

        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURLError(path)
        return url

    def build_headers(self, has_body: bool) -> dict[str, str]:
        """Headers sent with every request."""
        headers = {"Accept": "application/json"}
        if has_body:
            headers["Content-Type"] = "application/json"

        token = self._token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def encode_body(body: RequestBody) -> Any:
        """Convert a request body to its snake_case wire form."""
        if isinstance(body, BaseModel):
            local = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            local = {key: value for key, value in body.items() if value is not None}
        return keys_to_snake(local)

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[RequestBody],
        response_model: Optional[type[T]],
    ) -> Any:
        url = self.resolve_url(path)
        headers = self.build_headers(has_body=body is not None)
        payload = self.encode_body(body) if body is not None else None

        client_kwargs: dict[str, Any] = {}
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        if self._timeout is not None:
            client_kwargs["timeout"] = self._timeout

        logger.debug(f"{method} {url}")
        try:
            async with httpx.AsyncClient(**client_kwargs) as client:
                response = await client.request(method, url, headers=headers, json=payload)
        except httpx.TransportError as e:
            logger.warning(f"{method} {url.path} failed: {e!r}")
            raise InvalidResponseError(str(e) or e.__class__.__name__)

        if not 200 <= response.status_code <= 299:
            raise self._server_error(response)

        return self._decode(response, response_model)

    @staticmethod
    def _server_error(response: httpx.Response) -> ServerError:
        """Build the error for a non-2xx response."""
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("error"), str):
            message = data["error"]
        else:
            message = f"Server error ({response.status_code})"

        logger.warning(f"{response.request.method} {response.request.url.path} -> {response.status_code}")
        return ServerError(message, status_code=response.status_code)

    @staticmethod
    def _decode(response: httpx.Response, response_model: Optional[type[T]]) -> Any:
        """Decode a successful response into the caller's expected type."""
        if response_model is None and not response.content:
            return None

        try:
            data = keys_to_camel(response.json())
        except ValueError as e:
            raise DecodingError(str(e))

        if response_model is None:
            return data

        try:
            return response_model.model_validate(data)
        except PydanticValidationError as e:
            raise DecodingError(str(e))


def create_api_client(token_store: TokenSource, settings: Optional[Settings] = None) -> APIClient:
    """Build an API client pointed at the configured base URL."""
    settings = settings or get_settings()
    return APIClient(settings.api_base_url, token_store)
