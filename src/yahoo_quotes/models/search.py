"""Models for the ``/v1/finance/search`` response."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yahoo_quotes.models.base import UpstreamModel


class QuoteItemOpt(UpstreamModel):
    """A ranked search candidate with upstream optionality preserved."""

    exchange: str
    short_name: str | None = Field(default=None, alias="shortname")
    quote_type: str
    symbol: str
    index: str
    score: float
    type_display: str = Field(alias="typeDisp")
    long_name: str | None = Field(default=None, alias="longname")
    is_yahoo_finance: bool


class NewsItem(UpstreamModel):
    uuid: str
    title: str
    publisher: str
    link: str
    provider_publish_time: int
    news_type: str = Field(alias="type")


class SearchResultOpt(UpstreamModel):
    count: int
    quotes: list[QuoteItemOpt] = Field(default_factory=list)
    news: list[NewsItem] = Field(default_factory=list)


class QuoteItem(BaseModel):
    """Search candidate where missing names are replaced by ``""``."""

    model_config = ConfigDict(frozen=True)

    exchange: str
    short_name: str
    quote_type: str
    symbol: str
    index: str
    score: float
    type_display: str
    long_name: str
    is_yahoo_finance: bool

    @classmethod
    def from_opt(cls, item: QuoteItemOpt) -> QuoteItem:
        return cls(
            exchange=item.exchange,
            short_name=item.short_name or "",
            quote_type=item.quote_type,
            symbol=item.symbol,
            index=item.index,
            score=item.score,
            type_display=item.type_display,
            long_name=item.long_name or "",
            is_yahoo_finance=item.is_yahoo_finance,
        )


class SearchResult(BaseModel):
    """Convenience variant of ``SearchResultOpt``."""

    model_config = ConfigDict(frozen=True)

    count: int
    quotes: list[QuoteItem]
    news: list[NewsItem]

    @classmethod
    def from_opt(cls, result: SearchResultOpt) -> SearchResult:
        return cls(
            count=result.count,
            quotes=[QuoteItem.from_opt(q) for q in result.quotes],
            news=list(result.news),
        )
