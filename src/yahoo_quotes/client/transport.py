"""HTTP execution strategies and response classification.

Every request goes through one ``Dispatcher``. The dispatcher is written as
coroutines and delegates the actual I/O to a transport chosen at
construction:

- ``AsyncTransport`` wraps ``httpx.AsyncClient``.
- ``BlockingTransport`` wraps ``httpx.Client``. Its ``send`` is declared
  ``async`` but never suspends, so the same dispatcher coroutines can be
  driven to completion without an event loop.
"""

from __future__ import annotations

import json
import logging
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Any, Protocol, TypeVar, runtime_checkable

import httpx
from pydantic import BaseModel, ValidationError

from yahoo_quotes.core.config import ConnectorConfig
from yahoo_quotes.core.exceptions import (
    ApiError,
    ConnectionFailed,
    DeserializeFailed,
    FetchFailed,
    TooManyRequests,
)
from yahoo_quotes.models.base import ApiErrorMessage

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Bodies longer than this are never treated as a throttling page
_TOO_MANY_REQUESTS_MAX_BODY = 4000
_TOO_MANY_REQUESTS_MARKER = "too many requests"


@runtime_checkable
class Transport(Protocol):
    """Executes one HTTP request and returns the raw response."""

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response: ...

    async def close(self) -> None: ...


def _no_cookies() -> CookieJar:
    """A jar that stores nothing; the session cookie lives on ``Session`` only."""
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


def _client_options(config: ConnectorConfig) -> dict[str, Any]:
    return {
        "cookies": _no_cookies(),
        "headers": {"User-Agent": config.user_agent},
        "timeout": httpx.Timeout(config.timeout),
        "follow_redirects": True,
        "proxy": config.proxy,
    }


class AsyncTransport:
    """Non-blocking transport over ``httpx.AsyncClient``."""

    def __init__(self, config: ConnectorConfig, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(**_client_options(config))

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        return await self._client.request(
            method, url, params=params, headers=headers, json=json
        )

    async def close(self) -> None:
        await self._client.aclose()


class BlockingTransport:
    """Blocking transport over ``httpx.Client``.

    The coroutine methods complete without awaiting anything, which is what
    lets ``BlockingYahooConnector`` run them without an event loop.
    """

    def __init__(self, config: ConnectorConfig, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(**_client_options(config))

    async def send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        return self._client.request(
            method, url, params=params, headers=headers, json=json
        )

    async def close(self) -> None:
        self._client.close()


def is_too_many_requests(body: str) -> bool:
    """True when a short body reads like a throttling page."""
    return (
        len(body) <= _TOO_MANY_REQUESTS_MAX_BODY
        and _TOO_MANY_REQUESTS_MARKER in body.lower()
    )


class Dispatcher:
    """Sends requests and maps every outcome onto the error taxonomy.

    Classification, in order:

    - transport failure (DNS, connect, timeout, protocol) -> ``ConnectionFailed``
    - HTTP 429 -> ``TooManyRequests``
    - other non-200 -> ``TooManyRequests`` for a short throttling page,
      otherwise ``FetchFailed`` with the status
    - 200 with a non-JSON body -> ``TooManyRequests`` for a short throttling
      page, otherwise ``DeserializeFailed``
    - JSON with a non-null embedded ``error`` -> ``ApiError``, whatever its shape
    - JSON that fails model validation -> ``DeserializeFailed``

    Nothing is retried here.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    async def close(self) -> None:
        await self._transport.close()

    async def fetch(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send a request without inspecting the status.

        Raises:
            ConnectionFailed: No HTTP response was received.
        """
        logger.debug("%s %s params=%s", method, url, params)
        try:
            return await self._transport.send(
                method, url, params=params, headers=headers, json=json
            )
        except httpx.TransportError as e:
            raise ConnectionFailed(
                f"Request to {url} failed: {e}",
                context={"url": url, "error": str(e)},
            ) from e

    async def get_json(
        self,
        url: str,
        model: type[ModelT],
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> ModelT:
        """GET ``url`` and decode the body into ``model``."""
        response = await self.fetch("GET", url, params=params, headers=headers)
        return self.decode(response, model)

    async def get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        """GET ``url`` and return the body of a 200 response as text."""
        response = await self.fetch("GET", url, params=params, headers=headers)
        self.check_status(response)
        return response.text

    def check_status(self, response: httpx.Response) -> None:
        """Raise for anything but HTTP 200."""
        url = str(response.request.url)
        status = response.status_code
        if status == 200:
            return
        if status == 429 or is_too_many_requests(response.text):
            logger.warning("Throttled by yahoo! finance (HTTP %d) on %s", status, url)
            raise TooManyRequests(
                f"Too many requests: HTTP {status} from {url}",
                context={"url": url, "status_code": status},
            )
        raise FetchFailed(
            f"HTTP {status} from {url}",
            status_code=status,
            context={"url": url},
        )

    def decode(self, response: httpx.Response, model: type[ModelT]) -> ModelT:
        """Classify a response and decode its JSON body into ``model``.

        Raises:
            TooManyRequests: HTTP 429, or a throttling page instead of JSON.
            FetchFailed: Any other non-200 status.
            DeserializeFailed: Body is not JSON or does not fit ``model``.
            ApiError: The body carries a non-null ``error`` object.
        """
        self.check_status(response)
        data = self.parse_json(response)

        url = str(response.request.url)
        # An embedded error is checked before the envelope schema
        error = embedded_error(data)
        if error is not None:
            raise ApiError(error.code, error.description, context={"url": url})

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise DeserializeFailed(
                f"Unexpected response shape from {url}",
                context={"url": url, "reason": str(e)},
            ) from e

    def parse_json(self, response: httpx.Response) -> Any:
        """Parse the body as JSON, recognising throttling pages."""
        url = str(response.request.url)
        body = response.text
        try:
            return json.loads(body)
        except ValueError as e:
            if is_too_many_requests(body):
                logger.warning("Throttling page in place of JSON from %s", url)
                raise TooManyRequests(
                    f"Too many requests: non-JSON body from {url}",
                    context={"url": url},
                ) from e
            raise DeserializeFailed(
                f"Response from {url} is not valid JSON",
                context={"url": url, "reason": str(e)},
            ) from e


def embedded_error(data: Any) -> ApiErrorMessage | None:
    """Find the error object yahoo! embeds in a response envelope.

    Responses are wrapped as ``{"<envelope>": {"result": ..., "error": ...}}``
    (``chart``, ``quoteSummary``, ``finance``, ``optionChain`` and so on).
    The first envelope with a non-null ``error`` wins.
    """
    if not isinstance(data, dict):
        return None
    for envelope in data.values():
        if not isinstance(envelope, dict):
            continue
        error = envelope.get("error")
        if error is None:
            continue
        if isinstance(error, dict):
            return ApiErrorMessage(
                code=_as_text(error.get("code")),
                description=_as_text(error.get("description")),
            )
        return ApiErrorMessage(description=str(error))
    return None


def peek_error(response: httpx.Response) -> ApiErrorMessage | None:
    """The embedded error of a response body, if the body is JSON at all."""
    try:
        data = json.loads(response.text)
    except ValueError:
        return None
    return embedded_error(data)


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)
