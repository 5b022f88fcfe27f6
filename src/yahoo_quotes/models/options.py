"""Option chain models: the ``/v7/finance/options`` JSON and scraped rows."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from yahoo_quotes.models.base import ApiErrorMessage, UpstreamModel


class OptionContract(UpstreamModel):
    contract_symbol: str
    strike: float
    currency: str | None = None
    last_price: float | None = None
    change: float | None = None
    percent_change: float | None = None
    volume: int | None = None
    open_interest: int | None = None
    bid: float | None = None
    ask: float | None = None
    contract_size: str | None = None
    expiration: int | None = None
    last_trade_date: int | None = None
    implied_volatility: float | None = None
    in_the_money: bool | None = None


class OptionExpiry(UpstreamModel):
    expiration_date: int
    has_mini_options: bool = False
    calls: list[OptionContract] = Field(default_factory=list)
    puts: list[OptionContract] = Field(default_factory=list)


class OptionChainResult(UpstreamModel):
    underlying_symbol: str
    expiration_dates: list[int] = Field(default_factory=list)
    strikes: list[float] = Field(default_factory=list)
    has_mini_options: bool = False
    options: list[OptionExpiry] = Field(default_factory=list)


class OptionChainBlock(UpstreamModel):
    result: list[OptionChainResult] | None = None
    error: ApiErrorMessage | None = None


class OptionChainResponse(UpstreamModel):
    option_chain: OptionChainBlock


class OptionChain(BaseModel):
    """Calls and puts for every expiry upstream returned, flattened."""

    model_config = ConfigDict(frozen=True)

    underlying_symbol: str
    expiration_dates: list[int]
    strikes: list[float]
    calls: list[OptionContract]
    puts: list[OptionContract]

    @classmethod
    def from_result(cls, result: OptionChainResult) -> OptionChain:
        return cls(
            underlying_symbol=result.underlying_symbol,
            expiration_dates=list(result.expiration_dates),
            strikes=list(result.strikes),
            calls=[c for expiry in result.options for c in expiry.calls],
            puts=[p for expiry in result.options for p in expiry.puts],
        )


class ScrapedOption(BaseModel):
    """One row of the HTML options table."""

    model_config = ConfigDict(frozen=True)

    name: str
    last_trade_date: str
    strike: float
    last_price: float
    bid: float
    ask: float
    change: float
    change_pct: float
    volume: int
    open_interest: int
    impl_volatility: float
