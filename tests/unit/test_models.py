"""Tests for the response models in yahoo_quotes.models."""

import math

import pytest
from pydantic import ValidationError

from yahoo_quotes.models.chart import ChartMeta, TradingPeriods
from yahoo_quotes.models.numbers import parse_special_float
from yahoo_quotes.models.options import OptionChain, OptionChainResponse
from yahoo_quotes.models.search import SearchResult, SearchResultOpt
from yahoo_quotes.models.summary import QuoteResponseEnvelope, QuoteSummaryResponse


def _period(start: int, end: int) -> dict:
    return {"timezone": "EST", "start": start, "end": end, "gmtoffset": -18000}


class TestTradingPeriods:
    def test_object_shape(self):
        tp = TradingPeriods.model_validate(
            {
                "pre": [[_period(1, 2)]],
                "regular": [[_period(2, 3)], [_period(5, 6)]],
                "post": [[_period(3, 4)]],
            }
        )
        assert tp.pre[0][0].start == 1
        assert len(tp.regular) == 2
        assert tp.post[0][0].end == 4

    def test_array_shape_flattened_into_regular(self):
        tp = TradingPeriods.model_validate([[_period(2, 3)], [_period(5, 6)]])
        assert tp.pre is None
        assert tp.post is None
        assert [p.start for p in tp.regular[0]] == [2, 5]

    def test_null_is_empty(self):
        tp = TradingPeriods.model_validate(None)
        assert tp.regular is None

    def test_inside_meta(self, chart_meta):
        meta = ChartMeta.model_validate(
            {**chart_meta, "tradingPeriods": [[_period(10, 20)]]}
        )
        assert meta.trading_periods.regular[0][0].start == 10

    def test_meta_defaults_when_absent(self, chart_meta):
        meta = ChartMeta.model_validate(chart_meta)
        assert meta.trading_periods.regular is None


class TestChartMeta:
    def test_requires_symbol(self, chart_meta):
        body = dict(chart_meta)
        del body["symbol"]
        with pytest.raises(ValidationError):
            ChartMeta.model_validate(body)

    def test_optional_fields_may_be_absent(self):
        meta = ChartMeta.model_validate({"symbol": "EURUSD=X", "dataGranularity": "1d"})
        assert meta.currency is None
        assert meta.range == ""
        assert meta.valid_ranges == []


class TestSpecialFloats:
    @pytest.mark.parametrize(
        "raw, check",
        [
            ("Infinity", lambda v: v == math.inf),
            ("-Infinity", lambda v: v == -math.inf),
            ("NaN", math.isnan),
            ("infinity", lambda v: v == math.inf),
            ("nan", math.isnan),
        ],
    )
    def test_parse(self, raw, check):
        assert check(parse_special_float(raw))

    def test_other_values_pass_through(self):
        assert parse_special_float(12.5) == 12.5
        assert parse_special_float("12.5") == "12.5"
        assert parse_special_float(None) is None

    def test_summary_fields_decode(self, summary_json):
        response = QuoteSummaryResponse.model_validate(summary_json)
        data = response.first()
        assert data.summary_detail.forward_pe == math.inf
        assert data.summary_detail.trailing_pe == 30.9
        assert math.isnan(data.default_key_statistics.price_to_book)


class TestQuoteSummary:
    def test_aliases(self, summary_json):
        data = QuoteSummaryResponse.model_validate(summary_json).first()
        assert data.summary_detail.average_volume_10days == 52000000
        assert data.default_key_statistics.fifty_two_week_change == 0.23
        assert data.quote_type.timezone_full_name == "America/New_York"
        assert data.asset_profile.company_officers[0].name == "Mr. Timothy D. Cook"
        assert data.financial_data.recommendation_key == "buy"

    def test_finance_error_block(self, invalid_crumb_json):
        response = QuoteSummaryResponse.model_validate(invalid_crumb_json)
        assert response.first() is None
        assert response.finance.error.description == "Invalid Crumb"

    def test_no_error(self, summary_json):
        response = QuoteSummaryResponse.model_validate(summary_json)
        assert response.finance is None
        assert response.quote_summary.error is None


class TestSearch:
    def test_opt_preserves_missing_names(self, search_json):
        result = SearchResultOpt.model_validate(search_json)
        assert result.quotes[1].short_name is None
        assert result.quotes[1].long_name is None
        assert result.news[0].news_type == "STORY"

    def test_convenience_defaults_to_empty_string(self, search_json):
        result = SearchResult.from_opt(SearchResultOpt.model_validate(search_json))
        assert result.count == 2
        assert result.quotes[0].long_name == "Apple Inc."
        assert result.quotes[1].short_name == ""
        assert result.quotes[1].long_name == ""
        assert result.quotes[1].type_display == "Equity"


class TestOptions:
    def test_chain_flattens_expiries(self, options_json):
        response = OptionChainResponse.model_validate(options_json)
        chain = OptionChain.from_result(response.option_chain.result[0])
        assert chain.underlying_symbol == "AAPL"
        assert chain.strikes == [185.0, 190.0]
        assert [c.contract_symbol for c in chain.calls] == ["AAPL231117C00185000"]
        assert chain.calls[0].in_the_money is True
        assert chain.puts[0].volume is None


class TestQuoteEnvelope:
    def test_missing_key_is_none(self):
        assert QuoteResponseEnvelope.model_validate({}).quote_response is None

    def test_snapshot(self):
        envelope = QuoteResponseEnvelope.model_validate(
            {
                "quoteResponse": {
                    "result": [
                        {"symbol": "AAPL", "regularMarketPrice": 189.71, "trailingPE": "Infinity"}
                    ],
                    "error": None,
                }
            }
        )
        snapshot = envelope.quote_response.result[0]
        assert snapshot.regular_market_price == 189.71
        assert snapshot.trailing_pe == math.inf
