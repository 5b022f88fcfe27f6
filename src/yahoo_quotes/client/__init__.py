"""yahoo! finance HTTP client: transports, session handshake and connectors."""

from yahoo_quotes.client.connector import BlockingYahooConnector, YahooConnector
from yahoo_quotes.client.scraper import parse_options_page
from yahoo_quotes.client.session import Session, SessionManager
from yahoo_quotes.client.transport import (
    AsyncTransport,
    BlockingTransport,
    Dispatcher,
    Transport,
)

__all__ = [
    "YahooConnector",
    "BlockingYahooConnector",
    "Session",
    "SessionManager",
    "Dispatcher",
    "Transport",
    "AsyncTransport",
    "BlockingTransport",
    "parse_options_page",
]
