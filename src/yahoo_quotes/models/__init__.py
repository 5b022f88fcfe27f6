"""Response models for the yahoo! finance endpoints."""

from yahoo_quotes.models.base import ApiErrorMessage, UpstreamModel
from yahoo_quotes.models.chart import (
    AdjClose,
    Chart,
    ChartMeta,
    ChartResponse,
    CurrentTradingPeriod,
    EventsBlock,
    Indicators,
    PeriodInfo,
    QuoteList,
    QuoteSeries,
    TradingPeriods,
)
from yahoo_quotes.models.events import EarningsResponse, FinancialEvent
from yahoo_quotes.models.numbers import ZERO, Decimal, SpecialFloat
from yahoo_quotes.models.options import (
    OptionChain,
    OptionChainResponse,
    OptionContract,
    ScrapedOption,
)
from yahoo_quotes.models.quote import CapitalGain, Dividend, Quote, Split
from yahoo_quotes.models.search import (
    NewsItem,
    QuoteItem,
    QuoteItemOpt,
    SearchResult,
    SearchResultOpt,
)
from yahoo_quotes.models.summary import (
    AssetProfile,
    DefaultKeyStatistics,
    FinancialData,
    QuoteResponse,
    QuoteSnapshot,
    QuoteSummaryResponse,
    QuoteType,
    SummaryData,
    SummaryDetail,
)

__all__ = [
    # Numbers
    "Decimal",
    "ZERO",
    "SpecialFloat",
    # Base
    "UpstreamModel",
    "ApiErrorMessage",
    # Chart
    "ChartResponse",
    "Chart",
    "QuoteSeries",
    "ChartMeta",
    "TradingPeriods",
    "CurrentTradingPeriod",
    "PeriodInfo",
    "Indicators",
    "QuoteList",
    "AdjClose",
    "EventsBlock",
    # Quotes and events
    "Quote",
    "Split",
    "Dividend",
    "CapitalGain",
    "FinancialEvent",
    "EarningsResponse",
    # Search
    "SearchResultOpt",
    "SearchResult",
    "QuoteItemOpt",
    "QuoteItem",
    "NewsItem",
    # Summary
    "QuoteSummaryResponse",
    "SummaryData",
    "AssetProfile",
    "SummaryDetail",
    "DefaultKeyStatistics",
    "QuoteType",
    "FinancialData",
    "QuoteResponse",
    "QuoteSnapshot",
    # Options
    "OptionChainResponse",
    "OptionChain",
    "OptionContract",
    "ScrapedOption",
]
