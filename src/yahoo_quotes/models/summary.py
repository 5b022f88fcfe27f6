"""Models for the authenticated ticker-info and quote endpoints.

``QuoteSummaryResponse`` binds ``/v10/finance/quoteSummary`` (company
profile and statistics modules). ``QuoteResponse`` binds
``/v7/finance/quote`` (a market snapshot for one or more symbols).

Nearly every field is optional: upstream omits modules and values freely
depending on instrument type.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from yahoo_quotes.models.base import ApiErrorMessage, UpstreamModel
from yahoo_quotes.models.numbers import Decimal, SpecialFloat


class ValueWrapper(UpstreamModel):
    raw: int | None = None
    fmt: str | None = None
    long_fmt: str | None = None


class CompanyOfficer(UpstreamModel):
    name: str
    title: str | None = None
    age: int | None = None
    year_born: int | None = None
    fiscal_year: int | None = None
    total_pay: ValueWrapper | None = None


class AssetProfile(UpstreamModel):
    address1: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    phone: str | None = None
    website: str | None = None
    industry: str | None = None
    sector: str | None = None
    long_business_summary: str | None = None
    full_time_employees: int | None = None
    company_officers: list[CompanyOfficer] = Field(default_factory=list)
    audit_risk: int | None = None
    board_risk: int | None = None
    compensation_risk: int | None = None
    share_holder_rights_risk: int | None = None
    overall_risk: int | None = None
    governance_epoch_date: int | None = None
    compensation_as_of_epoch_date: int | None = None
    ir_website: str | None = None
    max_age: int | None = None


class SummaryDetail(UpstreamModel):
    max_age: int | None = None
    price_hint: int | None = None
    previous_close: float | None = None
    open: float | None = None
    day_low: float | None = None
    day_high: float | None = None
    regular_market_previous_close: float | None = None
    regular_market_open: float | None = None
    regular_market_day_low: float | None = None
    regular_market_day_high: float | None = None
    dividend_rate: float | None = None
    dividend_yield: float | None = None
    ex_dividend_date: int | None = None
    payout_ratio: float | None = None
    five_year_avg_dividend_yield: float | None = None
    beta: float | None = None
    trailing_pe: SpecialFloat = Field(default=None, alias="trailingPE")
    forward_pe: SpecialFloat = Field(default=None, alias="forwardPE")
    volume: int | None = None
    regular_market_volume: int | None = None
    average_volume: int | None = None
    average_volume_10days: int | None = Field(default=None, alias="averageVolume10days")
    average_daily_volume_10day: int | None = Field(default=None, alias="averageDailyVolume10Day")
    bid: float | None = None
    ask: float | None = None
    bid_size: int | None = None
    ask_size: int | None = None
    market_cap: int | None = None
    fifty_two_week_low: float | None = None
    fifty_two_week_high: float | None = None
    price_to_sales_trailing12_months: SpecialFloat = Field(
        default=None, alias="priceToSalesTrailing12Months"
    )
    fifty_day_average: float | None = None
    two_hundred_day_average: float | None = None
    trailing_annual_dividend_rate: float | None = None
    trailing_annual_dividend_yield: SpecialFloat = None
    currency: str | None = None
    from_currency: str | None = None
    to_currency: str | None = None
    last_market: str | None = None
    coin_market_cap_link: str | None = None
    algorithm: str | None = None
    tradeable: bool | None = None
    expire_date: int | None = None
    strike_price: float | None = None
    open_interest: Decimal | None = None


class DefaultKeyStatistics(UpstreamModel):
    max_age: int | None = None
    price_hint: int | None = None
    enterprise_value: int | None = None
    forward_pe: SpecialFloat = Field(default=None, alias="forwardPE")
    profit_margins: float | None = None
    float_shares: int | None = None
    shares_outstanding: int | None = None
    shares_short: int | None = None
    shares_short_prior_month: int | None = None
    shares_short_previous_month_date: int | None = None
    date_short_interest: int | None = None
    shares_percent_shares_out: float | None = None
    held_percent_insiders: float | None = None
    held_percent_institutions: float | None = None
    short_ratio: float | None = None
    short_percent_of_float: float | None = None
    beta: float | None = None
    implied_shares_outstanding: int | None = None
    category: str | None = None
    book_value: float | None = None
    price_to_book: SpecialFloat = None
    fund_family: str | None = None
    fund_inception_date: int | None = None
    legal_type: str | None = None
    last_fiscal_year_end: int | None = None
    next_fiscal_year_end: int | None = None
    most_recent_quarter: int | None = None
    earnings_quarterly_growth: float | None = None
    net_income_to_common: int | None = None
    trailing_eps: float | None = None
    forward_eps: float | None = None
    last_split_factor: str | None = None
    last_split_date: int | None = None
    enterprise_to_revenue: SpecialFloat = None
    enterprise_to_ebitda: SpecialFloat = None
    fifty_two_week_change: float | None = Field(default=None, alias="52WeekChange")
    sand_p_fifty_two_week_change: float | None = Field(default=None, alias="SandP52WeekChange")
    last_dividend_value: float | None = None
    last_dividend_date: int | None = None
    latest_share_class: str | None = None
    lead_investor: str | None = None


class QuoteType(UpstreamModel):
    exchange: str | None = None
    quote_type: str | None = None
    symbol: str | None = None
    underlying_symbol: str | None = None
    short_name: str | None = None
    long_name: str | None = None
    first_trade_date_epoch_utc: int | None = None
    timezone_full_name: str | None = Field(default=None, alias="timeZoneFullName")
    timezone_short_name: str | None = Field(default=None, alias="timeZoneShortName")
    uuid: str | None = None
    message_board_id: str | None = None
    gmt_off_set_milliseconds: int | None = None
    max_age: int | None = None


class FinancialData(UpstreamModel):
    max_age: int | None = None
    current_price: float | None = None
    target_high_price: float | None = None
    target_low_price: float | None = None
    target_mean_price: float | None = None
    target_median_price: float | None = None
    recommendation_mean: float | None = None
    recommendation_key: str | None = None
    number_of_analyst_opinions: int | None = None
    total_cash: int | None = None
    total_cash_per_share: float | None = None
    ebitda: int | None = None
    total_debt: int | None = None
    quick_ratio: float | None = None
    current_ratio: float | None = None
    total_revenue: int | None = None
    debt_to_equity: float | None = None
    revenue_per_share: float | None = None
    return_on_assets: float | None = None
    return_on_equity: float | None = None
    gross_profits: int | None = None
    free_cashflow: int | None = None
    operating_cashflow: int | None = None
    earnings_growth: float | None = None
    revenue_growth: float | None = None
    gross_margins: float | None = None
    ebitda_margins: float | None = None
    operating_margins: float | None = None
    profit_margins: float | None = None
    financial_currency: str | None = None


class SummaryData(UpstreamModel):
    asset_profile: AssetProfile | None = None
    summary_detail: SummaryDetail | None = None
    default_key_statistics: DefaultKeyStatistics | None = None
    quote_type: QuoteType | None = None
    financial_data: FinancialData | None = None


class ExtendedQuoteSummary(UpstreamModel):
    result: list[SummaryData] | None = None
    error: ApiErrorMessage | None = None


class FinanceBlock(UpstreamModel):
    """The ``finance`` envelope yahoo! uses to report request-level errors."""

    result: Any = None
    error: ApiErrorMessage | None = None


class QuoteSummaryResponse(UpstreamModel):
    quote_summary: ExtendedQuoteSummary | None = None
    finance: FinanceBlock | None = None

    def first(self) -> SummaryData | None:
        """The summary for the requested symbol, if upstream returned one."""
        if self.quote_summary is None or not self.quote_summary.result:
            return None
        return self.quote_summary.result[0]


class QuoteSnapshot(UpstreamModel):
    """Market snapshot for one symbol from ``/v7/finance/quote``."""

    symbol: str
    language: str | None = None
    region: str | None = None
    quote_type: str | None = None
    type_disp: str | None = None
    quote_source_name: str | None = None
    triggerable: bool | None = None
    currency: str | None = None
    market_state: str | None = None
    exchange: str | None = None
    full_exchange_name: str | None = None
    short_name: str | None = None
    long_name: str | None = None
    display_name: str | None = None
    exchange_timezone_name: str | None = None
    exchange_timezone_short_name: str | None = None
    market: str | None = None
    gmt_off_set_milliseconds: int | None = None
    esg_populated: bool | None = None
    tradeable: bool | None = None
    crypto_tradeable: bool | None = None
    price_hint: int | None = None
    source_interval: int | None = None
    exchange_data_delayed_by: int | None = None
    financial_currency: str | None = None
    regular_market_price: float | None = None
    regular_market_change: float | None = None
    regular_market_change_percent: float | None = None
    regular_market_time: int | None = None
    regular_market_open: float | None = None
    regular_market_day_high: float | None = None
    regular_market_day_low: float | None = None
    regular_market_day_range: str | None = None
    regular_market_volume: int | None = None
    regular_market_previous_close: float | None = None
    bid: float | None = None
    ask: float | None = None
    bid_size: int | None = None
    ask_size: int | None = None
    average_daily_volume3_month: int | None = None
    average_daily_volume10_day: int | None = None
    fifty_two_week_low: float | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_range: str | None = None
    fifty_two_week_low_change: float | None = None
    fifty_two_week_low_change_percent: float | None = None
    fifty_two_week_high_change: float | None = None
    fifty_two_week_high_change_percent: float | None = None
    fifty_day_average: float | None = None
    two_hundred_day_average: float | None = None
    dividend_date: int | None = None
    earnings_timestamp: int | None = None
    earnings_timestamp_start: int | None = None
    earnings_timestamp_end: int | None = None
    trailing_annual_dividend_rate: float | None = None
    trailing_annual_dividend_yield: SpecialFloat = None
    trailing_pe: SpecialFloat = Field(default=None, alias="trailingPE")
    forward_pe: SpecialFloat = Field(default=None, alias="forwardPE")
    eps_trailing_twelve_months: float | None = None
    eps_forward: float | None = None
    eps_current_year: float | None = None
    price_eps_current_year: SpecialFloat = None
    shares_outstanding: int | None = None
    book_value: float | None = None
    price_to_book: SpecialFloat = None
    market_cap: int | None = None
    average_analyst_rating: str | None = None
    first_trade_date_milliseconds: int | None = None
    message_board_id: str | None = None
    circulating_supply: int | None = None
    last_market: str | None = None
    from_currency: str | None = None
    to_currency: str | None = None


class QuoteResponse(UpstreamModel):
    result: list[QuoteSnapshot] = Field(default_factory=list)
    error: ApiErrorMessage | None = None


class QuoteResponseEnvelope(UpstreamModel):
    """Top level of ``/v7/finance/quote``; ``None`` when the key is absent."""

    quote_response: QuoteResponse | None = None
