"""Custom exception hierarchy for yahoo-quotes."""

from typing import Any


class YahooQuotesError(Exception):
    """Base exception for all yahoo-quotes errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(YahooQuotesError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field (str): the config field that failed validation
        value (Any): the invalid value
    """


# --- Transport ---


class TransportError(YahooQuotesError):
    """The request never produced a usable HTTP response.

    Policy: fatal. Never retried by the connector or the session layer.

    Context keys:
        url (str): the URL that was being fetched
    """


class ConnectionFailed(TransportError):
    """DNS, connect, read or timeout failure below the HTTP layer."""


class FetchFailed(TransportError):
    """The server answered with a non-200 status.

    Context keys:
        status_code (int | None): HTTP status code
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code
        if status_code is not None:
            self.context.setdefault("status_code", status_code)


# --- Rate limiting ---


class RateLimitError(YahooQuotesError):
    """Upstream throttling signal.

    Policy: fatal, never retried internally. Callers should back off.
    """


class TooManyRequests(RateLimitError):
    """HTTP 429 or a "too many requests" page in place of JSON.

    Context keys:
        url (str): the request that was throttled
    """


# --- Authentication ---


class AuthError(YahooQuotesError):
    """Cookie or crumb handshake failed.

    Policy: the session manager retries crumb/cookie rejections once, then
    raises. Everything else is raised immediately.
    """


class NoCookies(AuthError):
    """The cookie endpoint did not send a set-cookie header."""


class InvisibleAsciiInCookies(AuthError):
    """The set-cookie header is not representable as visible ASCII text."""


class InvalidCookie(AuthError):
    """The crumb endpoint rejected the cookie after the retry budget."""


class CrumbRejected(AuthError):
    """An authenticated endpoint rejected the crumb.

    Subclasses are the signals that trigger a crumb refresh and retry.
    """


class InvalidCrumb(CrumbRejected):
    """Crumb was empty or reported as "Invalid Crumb"."""


class Unauthorized(CrumbRejected):
    """Upstream reported an "Unauthorized" error code or HTTP 401."""


class Forbidden(Unauthorized):
    """HTTP 403 from the visualization endpoint. Never retried."""


# --- Schema ---


class SchemaError(YahooQuotesError):
    """The response does not have the expected shape.

    Policy: fatal. Data is never silently coerced into shape.
    """


class DeserializeFailed(SchemaError):
    """Body is not JSON or does not validate against the response model.

    Context keys:
        url (str): the request URL, when known
        reason (str): the underlying parser or validator message
    """


class DataInconsistency(SchemaError):
    """Parallel arrays disagree in length, or a required array is absent."""


class MissingField(SchemaError):
    """A required column or field is missing from a row.

    Context keys:
        field (str): the missing field name
    """


class InvalidDateFormat(SchemaError):
    """A date string could not be parsed.

    Context keys:
        value (str): the offending value
    """


# --- Upstream API errors ---


class ApiError(YahooQuotesError):
    """Structured error object embedded in an otherwise successful response.

    Policy: fatal. `code` and `description` are kept for diagnostics.
    """

    def __init__(
        self,
        code: str | None,
        description: str | None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            f"yahoo! finance returned an error: {code}: {description}", context
        )
        self.code = code
        self.description = description


# --- No data ---


class NoDataError(YahooQuotesError):
    """Well-formed response without usable data.

    Policy: fatal for callers that need a value, but not a schema problem.
    """


class NoResult(NoDataError):
    """The result list itself is absent from the response."""


class NoQuotes(NoDataError):
    """The series has no timestamps, or no point with a close price."""


class EmptyDataSet(NoDataError):
    """The response carries an empty result set where one was required."""
