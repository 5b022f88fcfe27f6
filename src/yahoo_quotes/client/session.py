"""Cookie and crumb handshake for the authenticated endpoints.

yahoo! finance gates the quote-summary, quote, options and visualization
endpoints behind a session cookie plus an anti-CSRF token (the "crumb")
bound to that cookie:

1. GET the cookie endpoint and keep the first ``set-cookie`` header.
2. GET the crumb endpoint with that cookie; the trimmed body is the crumb.
3. Send the cookie as a ``Cookie`` header and the crumb as a query
   parameter on every authenticated request.

Rejections are recovered by refetching the crumb (or the cookie, when the
crumb endpoint rejects it) at most ``ConnectorConfig.auth_retries`` times.
Transport and throttling failures are never retried.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, TypeVar

from yahoo_quotes.client.transport import Dispatcher
from yahoo_quotes.core.config import ConnectorConfig
from yahoo_quotes.core.exceptions import (
    CrumbRejected,
    Forbidden,
    InvalidCookie,
    InvalidCrumb,
    InvisibleAsciiInCookies,
    NoCookies,
    TooManyRequests,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INVALID_COOKIE_MARKER = "Invalid Cookie"
_TOO_MANY_REQUESTS_MARKER = "Too Many Requests"


@dataclass
class Session:
    """Cookie and crumb for one connector. Both start out unset."""

    cookie: str | None = None
    crumb: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.cookie is not None and self.crumb is not None

    @property
    def cookie_header(self) -> str | None:
        """The ``name=value`` pair of the stored ``set-cookie`` string."""
        if self.cookie is None:
            return None
        return self.cookie.split(";", 1)[0].strip()

    def clear(self) -> None:
        self.cookie = None
        self.crumb = None


def _is_visible_ascii(raw: bytes) -> bool:
    return all(b == 0x09 or 0x20 <= b <= 0x7E for b in raw)


class SessionManager:
    """Owns the session state and the authenticated-call retry loop.

    Parameters
    ----------
    dispatcher : Dispatcher
        Used for the cookie and crumb requests.
    config : ConnectorConfig
        Supplies the endpoint URLs and ``auth_retries``.
    lock : async context manager
        Serializes authenticated calls. The async connector passes an
        ``asyncio.Lock``; the blocking one a no-op context.
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        config: ConnectorConfig,
        lock: AbstractAsyncContextManager[Any],
    ) -> None:
        self._dispatcher = dispatcher
        self._config = config
        self._lock = lock
        self.session = Session()

    @property
    def retries(self) -> int:
        return self._config.auth_retries

    def reset(self) -> None:
        """Forget the cookie and crumb; the next authenticated call starts over."""
        self.session.clear()

    def auth_headers(self) -> dict[str, str]:
        cookie = self.session.cookie_header
        return {"Cookie": cookie} if cookie else {}

    async def get_cookie(self) -> str:
        """Fetch a fresh session cookie.

        The cookie endpoint usually answers 404; only the header matters.

        Raises:
            NoCookies: No ``set-cookie`` header in the response.
            InvisibleAsciiInCookies: The header holds non-visible-ASCII bytes.
            ConnectionFailed: The request itself failed.
        """
        url = self._config.cookie_url
        response = await self._dispatcher.fetch("GET", url)

        raw = next(
            (value for name, value in response.headers.raw if name.lower() == b"set-cookie"),
            None,
        )
        if raw is None:
            raise NoCookies(
                f"No set-cookie header from {url}",
                context={"url": url, "status_code": response.status_code},
            )
        if not _is_visible_ascii(raw):
            raise InvisibleAsciiInCookies(
                f"set-cookie header from {url} is not visible ASCII",
                context={"url": url},
            )

        logger.info("Obtained session cookie from %s", url)
        return raw.decode("ascii")

    async def get_crumb(self) -> str:
        """Fetch a crumb for the current cookie, fetching a cookie first if needed.

        Raises:
            TooManyRequests: HTTP 429 or a throttling body; never retried.
            InvalidCookie: The cookie was still rejected after refreshing it.
            InvalidCrumb: The crumb was still empty after retrying.
        """
        if self.session.cookie is None:
            self.session.cookie = await self.get_cookie()

        url = self._config.crumb_url
        attempts = self.retries + 1
        for attempt in range(attempts):
            response = await self._dispatcher.fetch(
                "GET", url, headers=self.auth_headers()
            )
            if response.status_code == 429:
                raise TooManyRequests(
                    f"Too many requests: HTTP 429 from {url}",
                    context={"url": url, "status_code": 429},
                )

            crumb = response.text.strip()
            if _TOO_MANY_REQUESTS_MARKER in crumb:
                raise TooManyRequests(
                    f"Too many requests: throttling body from {url}",
                    context={"url": url},
                )

            has_retry = attempt + 1 < attempts
            if _INVALID_COOKIE_MARKER in crumb:
                if not has_retry:
                    raise InvalidCookie(
                        f"Cookie rejected by {url}",
                        context={"url": url, "attempts": attempts},
                    )
                logger.warning(
                    "Cookie rejected by crumb endpoint, refreshing (attempt %d/%d)",
                    attempt + 1, attempts,
                )
                self.session.cookie = await self.get_cookie()
                continue

            if not crumb:
                if not has_retry:
                    raise InvalidCrumb(
                        f"Empty crumb from {url}",
                        context={"url": url, "attempts": attempts},
                    )
                logger.warning(
                    "Empty crumb, retrying (attempt %d/%d)", attempt + 1, attempts
                )
                continue

            logger.info("Obtained crumb")
            return crumb

        raise InvalidCrumb(f"No crumb from {url}", context={"url": url})

    async def ensure(self) -> Session:
        """Make sure both the cookie and the crumb are present."""
        if self.session.cookie is None:
            self.session.cookie = await self.get_cookie()
        if self.session.crumb is None:
            self.session.crumb = await self.get_crumb()
        return self.session

    async def refresh_crumb(self) -> None:
        self.session.crumb = await self.get_crumb()

    async def run_authenticated(
        self,
        operation: Callable[[Session], Awaitable[T]],
        retry_on: tuple[type[Exception], ...] = (CrumbRejected,),
    ) -> T:
        """Run ``operation`` with a valid session, retrying crumb rejections.

        ``operation`` receives the session and performs one request. When it
        raises one of ``retry_on``, the crumb is refetched and the operation
        repeated, at most ``auth_retries`` times; the last error is then
        re-raised unchanged. ``Forbidden`` is never retried. Calls are
        serialized by the manager's lock.
        """
        async with self._lock:
            attempts = self.retries + 1
            for attempt in range(attempts):
                session = await self.ensure()
                try:
                    return await operation(session)
                except Forbidden:
                    raise
                except retry_on as e:
                    if attempt + 1 >= attempts:
                        raise
                    logger.warning(
                        "Authenticated request rejected (%s), refreshing crumb (attempt %d/%d)",
                        type(e).__name__, attempt + 1, attempts,
                    )
                    await self.refresh_crumb()

            raise InvalidCrumb("Authenticated request was never attempted")
