"""yahoo-quotes: async and blocking client for yahoo! finance market data."""

from yahoo_quotes.client import BlockingYahooConnector, YahooConnector
from yahoo_quotes.core import ConnectorConfig, YahooQuotesError, load_config

__version__ = "0.1.0"

__all__ = [
    "YahooConnector",
    "BlockingYahooConnector",
    "ConnectorConfig",
    "YahooQuotesError",
    "load_config",
    "__version__",
]
