"""Public yahoo! finance connectors.

``YahooConnector`` is the async API. ``BlockingYahooConnector`` offers the
same methods as plain calls: it builds a ``YahooConnector`` over a blocking
transport and drives each coroutine to completion without an event loop.

Usage::

    async with YahooConnector() as yahoo:
        response = await yahoo.get_latest_quotes("AAPL", "1d")
        print(response.last_quote())

    with BlockingYahooConnector() as yahoo:
        print(yahoo.search_ticker("Apple").quotes)
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Coroutine
from datetime import datetime, timezone
from typing import Any, TypeVar

from yahoo_quotes.client.scraper import parse_options_page
from yahoo_quotes.client.session import Session, SessionManager
from yahoo_quotes.client.transport import (
    AsyncTransport,
    BlockingTransport,
    Dispatcher,
    ModelT,
    Transport,
    peek_error,
)
from yahoo_quotes.core.config import ConnectorConfig
from yahoo_quotes.core.exceptions import (
    ApiError,
    CrumbRejected,
    DataInconsistency,
    DeserializeFailed,
    EmptyDataSet,
    FetchFailed,
    Forbidden,
    InvalidCrumb,
    NoResult,
    TooManyRequests,
    Unauthorized,
)
from yahoo_quotes.models.base import ApiErrorMessage
from yahoo_quotes.models.chart import ChartResponse
from yahoo_quotes.models.events import (
    EVENT_EARNINGS,
    EarningsResponse,
    FinancialEvent,
    parse_financial_events,
)
from yahoo_quotes.models.options import OptionChain, OptionChainResponse, ScrapedOption
from yahoo_quotes.models.search import SearchResult, SearchResultOpt
from yahoo_quotes.models.summary import (
    QuoteResponse,
    QuoteResponseEnvelope,
    QuoteSummaryResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CHART_EVENTS = "div|split|capitalGains"
_SUMMARY_MODULES = "financialData,quoteType,defaultKeyStatistics,assetProfile,summaryDetail"
_CORS_DOMAIN = "finance.yahoo.com"
_INVALID_CRUMB_MARKER = "Invalid Crumb"
_UNAUTHORIZED_MARKER = "Unauthorized"

_EVENT_FIELDS = [
    "startdatetime",
    "timeZoneShortName",
    "epsestimate",
    "epsactual",
    "epssurprisepct",
    "eventtype",
]


def _unix(value: datetime) -> int:
    """Unix seconds for ``value``; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def _rejection(error: ApiErrorMessage | None) -> CrumbRejected | None:
    """Map an embedded error onto the crumb rejections worth retrying."""
    if error is None:
        return None
    if error.description and _INVALID_CRUMB_MARKER in error.description:
        return InvalidCrumb(
            f"Crumb rejected: {error.description}",
            context={"code": error.code, "description": error.description},
        )
    if error.code and _UNAUTHORIZED_MARKER in error.code:
        return Unauthorized(
            f"Request unauthorized: {error.code}",
            context={"code": error.code, "description": error.description},
        )
    return None


class YahooConnector:
    """Async client for the yahoo! finance chart, search and quote endpoints.

    Unauthenticated calls (chart, search, options page) are stateless and may
    run concurrently. Authenticated calls share one cookie/crumb session and
    are serialized.

    Parameters
    ----------
    config : ConnectorConfig, optional
        Endpoints and transport settings. Defaults apply when omitted.
    transport : Transport, optional
        HTTP execution strategy. Defaults to ``AsyncTransport``.
    lock : async context manager, optional
        Serializes authenticated calls. Defaults to an ``asyncio.Lock``.
    """

    def __init__(
        self,
        config: ConnectorConfig | None = None,
        *,
        transport: Transport | None = None,
        lock: contextlib.AbstractAsyncContextManager[Any] | None = None,
    ) -> None:
        self._config = config or ConnectorConfig()
        self._dispatcher = Dispatcher(transport or AsyncTransport(self._config))
        self._auth = SessionManager(
            self._dispatcher, self._config, lock if lock is not None else asyncio.Lock()
        )

    async def __aenter__(self) -> YahooConnector:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Called automatically by __aexit__."""
        await self._dispatcher.close()

    @property
    def config(self) -> ConnectorConfig:
        return self._config

    @property
    def session(self) -> Session:
        """The current cookie/crumb pair. Read-only access never mutates it."""
        return self._auth.session

    def reset_session(self) -> None:
        """Drop the cookie and crumb; the next authenticated call re-handshakes."""
        self._auth.reset()

    # --- Chart ---

    async def get_latest_quotes(self, symbol: str, interval: str) -> ChartResponse:
        """Quotes over the last month at ``interval``."""
        return await self.get_quote_range(symbol, interval, "1mo")

    async def get_quote_range(self, symbol: str, interval: str, range: str) -> ChartResponse:
        """Quotes over a named range such as ``"5d"``, ``"1y"`` or ``"max"``."""
        return await self._chart(symbol, {"interval": interval, "range": range})

    async def get_quote_history(
        self, symbol: str, start: datetime, end: datetime
    ) -> ChartResponse:
        """Daily quotes from ``start`` to ``end``."""
        return await self.get_quote_history_interval(symbol, start, end, "1d")

    async def get_quote_history_interval(
        self, symbol: str, start: datetime, end: datetime, interval: str
    ) -> ChartResponse:
        return await self._chart(
            symbol,
            {"period1": _unix(start), "period2": _unix(end), "interval": interval},
        )

    async def get_quote_history_interval_prepost(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        interval: str,
        prepost: bool,
    ) -> ChartResponse:
        """Like ``get_quote_history_interval``, optionally with extended hours."""
        return await self._chart(
            symbol,
            {
                "period1": _unix(start),
                "period2": _unix(end),
                "interval": interval,
                "includePrePost": _flag(prepost),
            },
        )

    async def get_quote_period_interval(
        self, symbol: str, range: str, interval: str, prepost: bool
    ) -> ChartResponse:
        return await self._chart(
            symbol,
            {"range": range, "interval": interval, "includePrePost": _flag(prepost)},
        )

    async def _chart(self, symbol: str, query: dict[str, Any]) -> ChartResponse:
        url = f"{self._config.chart_url}/{symbol}"
        params = {"symbol": symbol, **query, "events": _CHART_EVENTS}
        return await self._dispatcher.get_json(url, ChartResponse, params=params)

    # --- Search ---

    async def search_ticker_opt(self, name: str) -> SearchResultOpt:
        """Search instruments and news by free text, keeping optional names."""
        return await self._dispatcher.get_json(
            self._config.search_url, SearchResultOpt, params={"q": name}
        )

    async def search_ticker(self, name: str) -> SearchResult:
        """Search instruments by free text; missing names become ``""``."""
        return SearchResult.from_opt(await self.search_ticker_opt(name))

    # --- Authenticated ---

    async def get_ticker_info(self, symbol: str) -> QuoteSummaryResponse:
        """Company profile, statistics and financial data for one symbol.

        Raises:
            InvalidCrumb: The crumb was still rejected after refreshing it.
            Unauthorized: The request was still unauthorized after refreshing.
            ApiError: Upstream embedded any other error.
        """
        url = f"{self._config.quote_summary_url}/{symbol}"

        async def once(session: Session) -> QuoteSummaryResponse:
            params = {
                "modules": _SUMMARY_MODULES,
                "corsDomain": _CORS_DOMAIN,
                "formatted": "false",
                "symbol": symbol,
                "crumb": session.crumb,
            }
            return await self._authorized_json(url, params, QuoteSummaryResponse)

        return await self._auth.run_authenticated(once)

    async def get_quote_summary(self, symbols: list[str]) -> QuoteResponse:
        """Market snapshot for one or more symbols.

        Raises:
            DataInconsistency: The body has no ``quoteResponse`` object.
        """
        url = self._config.quote_url

        async def once(session: Session) -> QuoteResponse:
            params = {"symbols": ",".join(symbols), "crumb": session.crumb}
            response = await self._dispatcher.fetch(
                "GET", url, params=params, headers=self._auth.auth_headers()
            )
            rejection = _rejection(peek_error(response))
            if rejection is not None:
                raise rejection

            envelope = self._dispatcher.decode(response, QuoteResponseEnvelope)
            if envelope.quote_response is None:
                raise DataInconsistency(
                    "Response has no quoteResponse object",
                    context={"url": url, "symbols": symbols},
                )
            return envelope.quote_response

        return await self._auth.run_authenticated(once)

    async def get_options(self, symbol: str) -> OptionChain:
        """Option chain (calls and puts) for the nearest expiry.

        Raises:
            NoResult: The response has no result list.
            EmptyDataSet: The result list is empty.
        """
        url = f"{self._config.options_url}/{symbol}"

        async def once(session: Session) -> OptionChainResponse:
            return await self._authorized_json(
                url, {"crumb": session.crumb}, OptionChainResponse
            )

        response = await self._auth.run_authenticated(once)
        result = response.option_chain.result
        if result is None:
            raise NoResult(
                f"No option chain for {symbol}", context={"symbol": symbol}
            )
        if not result:
            raise EmptyDataSet(
                f"Empty option chain for {symbol}", context={"symbol": symbol}
            )
        return OptionChain.from_result(result[0])

    async def get_financial_events(self, symbol: str, limit: int = 250) -> list[FinancialEvent]:
        """Earnings, meeting and call events for ``symbol``, newest first.

        ``limit`` is clamped to ``ConnectorConfig.max_events_limit``.

        Raises:
            ValueError: Empty symbol or ``limit`` below 1.
            TooManyRequests: HTTP 429.
            Unauthorized: HTTP 403, or HTTP 401 after refreshing the crumb.
            FetchFailed: HTTP 404 (unknown ticker) or another error status.
            InvalidCrumb: The crumb was still rejected after refreshing it.
            DeserializeFailed: The body still did not parse after refreshing.
            ApiError: Upstream embedded any other error.
        """
        if not symbol:
            raise ValueError("symbol must not be empty")
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if limit > self._config.max_events_limit:
            logger.warning(
                "Events limit %d exceeds maximum, clamping to %d",
                limit, self._config.max_events_limit,
            )
            limit = self._config.max_events_limit

        url = self._config.events_url
        body = {
            "size": limit,
            "query": {"operator": "eq", "operands": ["ticker", symbol]},
            "sortField": "startdatetime",
            "sortType": "DESC",
            "entityIdType": "earnings",
            "includeFields": _EVENT_FIELDS,
        }

        async def once(session: Session) -> EarningsResponse:
            params = {
                "lang": self._config.lang,
                "region": self._config.region,
                "crumb": session.crumb,
            }
            response = await self._dispatcher.fetch(
                "POST", url, params=params, headers=self._auth.auth_headers(), json=body
            )
            _check_events_status(response.status_code, url, symbol)

            error = peek_error(response)
            if error is not None:
                if error.description and _INVALID_CRUMB_MARKER in error.description:
                    raise InvalidCrumb(
                        f"Crumb rejected: {error.description}",
                        context={"url": url, "symbol": symbol},
                    )
                raise ApiError(error.code, error.description, context={"url": url})
            return self._dispatcher.decode(response, EarningsResponse)

        response = await self._auth.run_authenticated(
            once, retry_on=(CrumbRejected, DeserializeFailed)
        )
        return parse_financial_events(response)

    async def get_earnings_only(self, symbol: str, limit: int = 250) -> list[FinancialEvent]:
        """``get_financial_events`` restricted to earnings releases."""
        events = await self.get_financial_events(symbol, limit)
        return [e for e in events if e.event_type == EVENT_EARNINGS]

    # --- Scraped ---

    async def scrape_options(self, symbol: str) -> list[ScrapedOption]:
        """Option rows scraped from the public quote page.

        Returns an empty list when the page carries no options table.
        """
        url = f"{self._config.options_page_url}/{symbol}/options"
        html = await self._dispatcher.get_text(url, params={"p": symbol})
        return parse_options_page(html)

    # --- Internals ---

    async def _authorized_json(
        self, url: str, params: dict[str, Any], model: type[ModelT]
    ) -> ModelT:
        """One authenticated GET: crumb rejections first, then normal decoding."""
        response = await self._dispatcher.fetch(
            "GET", url, params=params, headers=self._auth.auth_headers()
        )
        rejection = _rejection(peek_error(response))
        if rejection is not None:
            rejection.context["url"] = url
            raise rejection
        return self._dispatcher.decode(response, model)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _check_events_status(status: int, url: str, symbol: str) -> None:
    if 200 <= status < 300:
        return
    context = {"url": url, "symbol": symbol}
    if status == 429:
        raise TooManyRequests(
            f"Too many requests: POST {url} for {symbol}",
            context={**context, "status_code": status},
        )
    if status == 401:
        raise Unauthorized(f"HTTP 401 from {url}", context=context)
    if status == 403:
        raise Forbidden(f"HTTP 403 from {url}", context=context)
    if status == 404:
        raise FetchFailed(f"Ticker {symbol} not found", status_code=status, context=context)
    raise FetchFailed(f"HTTP error: {status}", status_code=status, context=context)


def _run_blocking(coro: Coroutine[Any, Any, T]) -> T:
    """Drive a coroutine that never suspends and return its value."""
    try:
        coro.send(None)
    except StopIteration as stop:
        return stop.value
    coro.close()
    raise RuntimeError("Blocking connector awaited something that needs an event loop")


class BlockingYahooConnector:
    """Synchronous counterpart of ``YahooConnector``.

    Wraps a ``YahooConnector`` built over ``BlockingTransport`` with a no-op
    lock, so every call runs the exact same request and validation code.
    An instance is meant for one thread at a time.

    Usage::

        with BlockingYahooConnector() as yahoo:
            quote = yahoo.get_latest_quotes("MSFT", "1d").last_quote()
    """

    def __init__(
        self,
        config: ConnectorConfig | None = None,
        *,
        transport: Transport | None = None,
    ) -> None:
        config = config or ConnectorConfig()
        self._inner = YahooConnector(
            config,
            transport=transport or BlockingTransport(config),
            lock=contextlib.nullcontext(),
        )

    def __enter__(self) -> BlockingYahooConnector:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        _run_blocking(self._inner.close())

    @property
    def config(self) -> ConnectorConfig:
        return self._inner.config

    @property
    def session(self) -> Session:
        return self._inner.session

    def reset_session(self) -> None:
        self._inner.reset_session()

    def get_latest_quotes(self, symbol: str, interval: str) -> ChartResponse:
        return _run_blocking(self._inner.get_latest_quotes(symbol, interval))

    def get_quote_range(self, symbol: str, interval: str, range: str) -> ChartResponse:
        return _run_blocking(self._inner.get_quote_range(symbol, interval, range))

    def get_quote_history(self, symbol: str, start: datetime, end: datetime) -> ChartResponse:
        return _run_blocking(self._inner.get_quote_history(symbol, start, end))

    def get_quote_history_interval(
        self, symbol: str, start: datetime, end: datetime, interval: str
    ) -> ChartResponse:
        return _run_blocking(
            self._inner.get_quote_history_interval(symbol, start, end, interval)
        )

    def get_quote_history_interval_prepost(
        self,
        symbol: str,
        start: datetime,
        end: datetime,
        interval: str,
        prepost: bool,
    ) -> ChartResponse:
        return _run_blocking(
            self._inner.get_quote_history_interval_prepost(
                symbol, start, end, interval, prepost
            )
        )

    def get_quote_period_interval(
        self, symbol: str, range: str, interval: str, prepost: bool
    ) -> ChartResponse:
        return _run_blocking(
            self._inner.get_quote_period_interval(symbol, range, interval, prepost)
        )

    def search_ticker_opt(self, name: str) -> SearchResultOpt:
        return _run_blocking(self._inner.search_ticker_opt(name))

    def search_ticker(self, name: str) -> SearchResult:
        return _run_blocking(self._inner.search_ticker(name))

    def get_ticker_info(self, symbol: str) -> QuoteSummaryResponse:
        return _run_blocking(self._inner.get_ticker_info(symbol))

    def get_quote_summary(self, symbols: list[str]) -> QuoteResponse:
        return _run_blocking(self._inner.get_quote_summary(symbols))

    def get_options(self, symbol: str) -> OptionChain:
        return _run_blocking(self._inner.get_options(symbol))

    def get_financial_events(self, symbol: str, limit: int = 250) -> list[FinancialEvent]:
        return _run_blocking(self._inner.get_financial_events(symbol, limit))

    def get_earnings_only(self, symbol: str, limit: int = 250) -> list[FinancialEvent]:
        return _run_blocking(self._inner.get_earnings_only(symbol, limit))

    def scrape_options(self, symbol: str) -> list[ScrapedOption]:
        return _run_blocking(self._inner.scrape_options(symbol))
