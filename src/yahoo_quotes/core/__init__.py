"""yahoo_quotes.core: configuration and the exception hierarchy."""

from yahoo_quotes.core.config import ConnectorConfig, YahooQuotesConfig, load_config
from yahoo_quotes.core.exceptions import (
    ApiError,
    AuthError,
    ConfigError,
    ConnectionFailed,
    CrumbRejected,
    DataInconsistency,
    DeserializeFailed,
    EmptyDataSet,
    FetchFailed,
    Forbidden,
    InvalidCookie,
    InvalidCrumb,
    InvalidDateFormat,
    InvisibleAsciiInCookies,
    MissingField,
    NoCookies,
    NoDataError,
    NoQuotes,
    NoResult,
    RateLimitError,
    SchemaError,
    TooManyRequests,
    TransportError,
    Unauthorized,
    YahooQuotesError,
)

__all__ = [
    # Config
    "ConnectorConfig",
    "YahooQuotesConfig",
    "load_config",
    # Exceptions
    "YahooQuotesError",
    "ConfigError",
    "TransportError",
    "ConnectionFailed",
    "FetchFailed",
    "RateLimitError",
    "TooManyRequests",
    "AuthError",
    "NoCookies",
    "InvisibleAsciiInCookies",
    "InvalidCookie",
    "CrumbRejected",
    "InvalidCrumb",
    "Unauthorized",
    "Forbidden",
    "SchemaError",
    "DeserializeFailed",
    "DataInconsistency",
    "MissingField",
    "InvalidDateFormat",
    "ApiError",
    "NoDataError",
    "NoResult",
    "NoQuotes",
    "EmptyDataSet",
]
