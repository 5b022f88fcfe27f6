"""Shared pytest fixtures for yahoo-quotes."""

import pytest

from yahoo_quotes.core.config import ConnectorConfig


@pytest.fixture
def connector_config() -> ConnectorConfig:
    return ConnectorConfig(timeout=5, user_agent="TestAgent/1.0")


@pytest.fixture
def chart_meta() -> dict:
    return {
        "currency": "USD",
        "symbol": "AAPL",
        "exchangeName": "NMS",
        "fullExchangeName": "NasdaqGS",
        "instrumentType": "EQUITY",
        "firstTradeDate": 345479400,
        "regularMarketTime": 1700168401,
        "hasPrePostMarketData": True,
        "gmtoffset": -18000,
        "timezone": "EST",
        "exchangeTimezoneName": "America/New_York",
        "regularMarketPrice": 189.71,
        "chartPreviousClose": 186.4,
        "priceHint": 2,
        "currentTradingPeriod": {
            "pre": {"timezone": "EST", "start": 1700125200, "end": 1700145000, "gmtoffset": -18000},
            "regular": {"timezone": "EST", "start": 1700145000, "end": 1700168400, "gmtoffset": -18000},
            "post": {"timezone": "EST", "start": 1700168400, "end": 1700182800, "gmtoffset": -18000},
        },
        "dataGranularity": "1d",
        "range": "",
        "validRanges": ["1d", "5d", "1mo", "3mo", "6mo", "1y", "2y", "5y", "10y", "ytd", "max"],
    }


@pytest.fixture
def make_chart(chart_meta):
    """Build a chart response body from parallel arrays."""

    def _make(
        timestamps,
        close,
        open=None,
        high=None,
        low=None,
        volume=None,
        adjclose=None,
        events=None,
        omit=(),
    ) -> dict:
        n = len(timestamps)
        block = {
            "open": open if open is not None else [1.0] * n,
            "high": high if high is not None else [2.0] * n,
            "low": low if low is not None else [0.5] * n,
            "close": close,
            "volume": volume if volume is not None else [1000] * n,
        }
        for name in omit:
            block.pop(name, None)
        series = {
            "meta": chart_meta,
            "timestamp": timestamps,
            "indicators": {"quote": [block]},
        }
        if adjclose is not None:
            series["indicators"]["adjclose"] = [{"adjclose": adjclose}]
        if events is not None:
            series["events"] = events
        return {"chart": {"result": [series], "error": None}}

    return _make


@pytest.fixture
def chart_json(make_chart) -> dict:
    """Three daily AAPL bars with a dividend and a split."""
    return make_chart(
        timestamps=[1699885800, 1699972200, 1700058600],
        open=[185.82, 187.7, 189.57],
        high=[186.03, 188.11, 190.05],
        low=[184.21, 186.3, 188.19],
        close=[184.8, 187.44, 188.01],
        volume=[43627500, 60108400, 53790500],
        adjclose=[184.05, 186.68, 187.25],
        events={
            "dividends": {
                "1699626600": {"amount": 0.24, "date": 1699626600},
                "1691760600": {"amount": 0.24, "date": 1691760600},
            },
            "splits": {
                "1598880600": {
                    "date": 1598880600,
                    "numerator": 4,
                    "denominator": 1,
                    "splitRatio": "4:1",
                },
                "1402061400": {
                    "date": 1402061400,
                    "numerator": 7,
                    "denominator": 1,
                    "splitRatio": "7:1",
                },
            },
        },
    )


@pytest.fixture
def search_json() -> dict:
    return {
        "count": 2,
        "quotes": [
            {
                "exchange": "NMS",
                "shortname": "Apple Inc.",
                "quoteType": "EQUITY",
                "symbol": "AAPL",
                "index": "quotes",
                "score": 31377.0,
                "typeDisp": "Equity",
                "longname": "Apple Inc.",
                "exchDisp": "NASDAQ",
                "isYahooFinance": True,
            },
            {
                "exchange": "NEO",
                "quoteType": "EQUITY",
                "symbol": "AAPL.NE",
                "index": "quotes",
                "score": 20022.0,
                "typeDisp": "Equity",
                "isYahooFinance": True,
            },
        ],
        "news": [
            {
                "uuid": "5c6b1f5e-0c2f-3e0b-9b1a-3b0a1d2e4f55",
                "title": "Apple ships new chips",
                "publisher": "Reuters",
                "link": "https://finance.yahoo.com/news/apple-ships-new-chips.html",
                "providerPublishTime": 1700150000,
                "type": "STORY",
            }
        ],
    }


@pytest.fixture
def summary_json() -> dict:
    return {
        "quoteSummary": {
            "result": [
                {
                    "assetProfile": {
                        "city": "Cupertino",
                        "country": "United States",
                        "website": "https://www.apple.com",
                        "industry": "Consumer Electronics",
                        "sector": "Technology",
                        "fullTimeEmployees": 161000,
                        "companyOfficers": [
                            {"name": "Mr. Timothy D. Cook", "title": "CEO & Director", "age": 62}
                        ],
                    },
                    "summaryDetail": {
                        "previousClose": 188.01,
                        "marketCap": 2950000000000,
                        "trailingPE": 30.9,
                        "forwardPE": "Infinity",
                        "averageVolume10days": 52000000,
                    },
                    "quoteType": {
                        "exchange": "NMS",
                        "quoteType": "EQUITY",
                        "symbol": "AAPL",
                        "shortName": "Apple Inc.",
                        "longName": "Apple Inc.",
                        "timeZoneFullName": "America/New_York",
                        "timeZoneShortName": "EST",
                    },
                    "financialData": {
                        "currentPrice": 189.71,
                        "recommendationKey": "buy",
                        "financialCurrency": "USD",
                    },
                    "defaultKeyStatistics": {
                        "52WeekChange": 0.23,
                        "priceToBook": "NaN",
                    },
                }
            ],
            "error": None,
        }
    }


@pytest.fixture
def invalid_crumb_json() -> dict:
    return {
        "finance": {
            "result": None,
            "error": {"code": "Unauthorized", "description": "Invalid Crumb"},
        }
    }


@pytest.fixture
def events_json() -> dict:
    return {
        "finance": {
            "result": [
                {
                    "documents": [
                        {
                            "columns": [
                                {"label": "Event Start Date"},
                                {"label": "Timezone short name"},
                                {"label": "EPS Estimate"},
                                {"label": "Reported EPS"},
                                {"label": "Surprise (%)"},
                                {"label": "Event Type"},
                            ],
                            "rows": [
                                ["2024-02-01T21:30:00Z", "EST", 2.1, 2.18, 3.81, 2],
                                ["2023-11-02T20:30:00.000Z", "EDT", 1.39, 1.46, 5.04, "2"],
                                ["2023-09-12T17:00:00", "EDT", None, None, None, 11],
                            ],
                        }
                    ]
                }
            ],
            "error": None,
        }
    }


@pytest.fixture
def options_json() -> dict:
    return {
        "optionChain": {
            "result": [
                {
                    "underlyingSymbol": "AAPL",
                    "expirationDates": [1700179200, 1700784000],
                    "strikes": [185.0, 190.0],
                    "hasMiniOptions": False,
                    "options": [
                        {
                            "expirationDate": 1700179200,
                            "hasMiniOptions": False,
                            "calls": [
                                {
                                    "contractSymbol": "AAPL231117C00185000",
                                    "strike": 185.0,
                                    "currency": "USD",
                                    "lastPrice": 4.8,
                                    "volume": 12000,
                                    "openInterest": 30000,
                                    "bid": 4.7,
                                    "ask": 4.85,
                                    "inTheMoney": True,
                                }
                            ],
                            "puts": [
                                {
                                    "contractSymbol": "AAPL231117P00190000",
                                    "strike": 190.0,
                                    "lastPrice": 0.6,
                                    "inTheMoney": True,
                                }
                            ],
                        }
                    ],
                }
            ],
            "error": None,
        }
    }


@pytest.fixture
def options_html() -> str:
    return """
    <html><body>
    <table class="list-options W(100%)">
      <tr><th>Contract Name</th><th>Last Trade Date</th><th>Strike</th></tr>
      <tr>
        <td>AAPL231117C00185000</td><td>2023-11-16 3:59PM EST</td><td>1,185.00</td>
        <td>4.80</td><td>4.70</td><td>4.85</td><td>-0.35</td><td>-6.80%</td>
        <td>12,000</td><td>30,000</td><td>24.61%</td>
      </tr>
      <tr>
        <td>AAPL231117C00190000</td><td>2023-11-16 3:58PM EST</td><td>190.00</td>
        <td>-</td><td>0.95</td><td>1.00</td><td>0.00</td><td>-</td>
        <td>-</td><td>8,500</td><td>22.10%</td>
      </tr>
    </table>
    </body></html>
    """
