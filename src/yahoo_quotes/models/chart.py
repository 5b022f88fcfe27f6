"""Models for the ``/v8/finance/chart`` response."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field, model_validator

from yahoo_quotes.models.base import ApiErrorMessage, UpstreamModel
from yahoo_quotes.models.numbers import Decimal
from yahoo_quotes.models.quote import CapitalGain, Dividend, Quote, Split

if TYPE_CHECKING:
    from yahoo_quotes.assembler import QuoteAssembler


class PeriodInfo(UpstreamModel):
    """One trading session window in Unix seconds."""

    timezone: str
    start: int
    end: int
    gmtoffset: int


class CurrentTradingPeriod(UpstreamModel):
    pre: PeriodInfo
    regular: PeriodInfo
    post: PeriodInfo


class TradingPeriods(UpstreamModel):
    """Trading sessions over the requested range.

    Upstream sends either an object with ``pre``/``regular``/``post`` lists of
    lists, or a bare list of lists. The bare form only ever describes regular
    sessions, so it is flattened into ``regular``.
    """

    pre: list[list[PeriodInfo]] | None = None
    regular: list[list[PeriodInfo]] | None = None
    post: list[list[PeriodInfo]] | None = None

    @model_validator(mode="before")
    @classmethod
    def from_wire_shape(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, list):
            regular = [period for group in data for period in (group or [])]
            return {"regular": [regular]}
        return data


class ChartMeta(UpstreamModel):
    """Instrument metadata returned with every chart series."""

    symbol: str
    data_granularity: str
    range: str = ""
    valid_ranges: list[str] = Field(default_factory=list)

    currency: str | None = None
    long_name: str | None = None
    short_name: str | None = None
    instrument_type: str | None = None
    exchange_name: str | None = None
    full_exchange_name: str | None = None
    first_trade_date: int | None = None
    regular_market_time: int | None = None
    gmtoffset: int | None = None
    timezone: str | None = None
    exchange_timezone_name: str | None = None
    regular_market_price: Decimal | None = None
    chart_previous_close: Decimal | None = None
    previous_close: Decimal | None = None
    has_pre_post_market_data: bool = False
    fifty_two_week_high: Decimal | None = None
    fifty_two_week_low: Decimal | None = None
    regular_market_day_high: Decimal | None = None
    regular_market_day_low: Decimal | None = None
    regular_market_volume: Decimal | None = None
    scale: int | None = None
    price_hint: int | None = None
    current_trading_period: CurrentTradingPeriod | None = None
    trading_periods: TradingPeriods = Field(default_factory=TradingPeriods)


class QuoteList(UpstreamModel):
    """Parallel OHLCV arrays. Each array may be absent; entries may be null."""

    open: list[Decimal | None] | None = None
    high: list[Decimal | None] | None = None
    low: list[Decimal | None] | None = None
    close: list[Decimal | None] | None = None
    volume: list[int | None] | None = None


class AdjClose(UpstreamModel):
    adjclose: list[Decimal | None] | None = None


class Indicators(UpstreamModel):
    quote: list[QuoteList] = Field(default_factory=list)
    adjclose: list[AdjClose] | None = None

    def adjclose_values(self) -> list[Decimal | None] | None:
        """The adjusted-close array, or None when upstream did not send one."""
        if not self.adjclose:
            return None
        return self.adjclose[0].adjclose


class EventsBlock(UpstreamModel):
    """Corporate actions keyed by Unix timestamp. Key order is meaningless."""

    splits: dict[int, Split] | None = None
    dividends: dict[int, Dividend] | None = None
    capital_gains: dict[int, CapitalGain] | None = None


class QuoteSeries(UpstreamModel):
    """One instrument's chart data for a single request."""

    meta: ChartMeta
    timestamp: list[int] | None = None
    events: EventsBlock | None = None
    indicators: Indicators = Field(default_factory=Indicators)


class Chart(UpstreamModel):
    result: list[QuoteSeries] | None = None
    error: ApiErrorMessage | None = None


class ChartResponse(UpstreamModel):
    """Top-level chart response with quote-assembly shortcuts.

    The shortcuts delegate to ``QuoteAssembler``; see it for the validation
    rules and the errors raised.
    """

    chart: Chart

    @property
    def assembler(self) -> QuoteAssembler:
        from yahoo_quotes.assembler import QuoteAssembler

        return QuoteAssembler(self)

    def quotes(self) -> list[Quote]:
        return self.assembler.quotes()

    def last_quote(self) -> Quote:
        return self.assembler.last_quote()

    def metadata(self) -> ChartMeta:
        return self.assembler.metadata()

    def splits(self) -> list[Split]:
        return self.assembler.splits()

    def dividends(self) -> list[Dividend]:
        return self.assembler.dividends()

    def capital_gains(self) -> list[CapitalGain]:
        return self.assembler.capital_gains()
