"""Financial events (earnings, meetings, calls) from the visualization endpoint.

The endpoint answers with a column-labelled table: ``columns`` lists the
labels, each row is a heterogeneous value array aligned to them by position.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from yahoo_quotes.core.exceptions import (
    DataInconsistency,
    InvalidDateFormat,
    MissingField,
)
from yahoo_quotes.models.base import UpstreamModel

# Column labels used by the earnings screener
COL_START_DATE = "Event Start Date"
COL_EVENT_TYPE = "Event Type"
COL_EPS_ESTIMATE = "EPS Estimate"
COL_REPORTED_EPS = "Reported EPS"
COL_SURPRISE = "Surprise (%)"
COL_TIMEZONE = "Timezone short name"

EVENT_EARNINGS = "Earnings"
EVENT_MEETING = "Meeting"
EVENT_CALL = "Call"
EVENT_UNKNOWN = "Unknown"

_EVENT_TYPE_CODES: dict[str, str] = {
    "1": EVENT_CALL,
    "2": EVENT_EARNINGS,
    "11": EVENT_MEETING,
}


class EarningsColumn(UpstreamModel):
    label: str


class EarningsDocument(UpstreamModel):
    columns: list[EarningsColumn] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)


class EarningsResult(UpstreamModel):
    documents: list[EarningsDocument] = Field(default_factory=list)


class EarningsFinance(UpstreamModel):
    result: list[EarningsResult] = Field(default_factory=list)
    error: dict[str, Any] | None = None


class EarningsResponse(UpstreamModel):
    finance: EarningsFinance


class FinancialEvent(BaseModel):
    """One dated corporate event with EPS figures where available."""

    model_config = ConfigDict(frozen=True)

    earnings_date: datetime
    event_type: str
    eps_estimate: float | None = None
    reported_eps: float | None = None
    surprise_percent: float | None = None
    timezone: str | None = None


def parse_financial_events(response: EarningsResponse) -> list[FinancialEvent]:
    """Rebuild typed events from the first document of the response.

    Returns an empty list when upstream found nothing. The label-to-index
    lookup is built once per document.

    Raises:
        DataInconsistency: The document has rows but no column labels.
        MissingField: A row lacks the event start date.
        InvalidDateFormat: A start date is not ISO 8601.
    """
    if not response.finance.result:
        return []
    documents = response.finance.result[0].documents
    if not documents:
        return []

    document = documents[0]
    if not document.columns:
        raise DataInconsistency("Earnings document has no columns")

    column_index = {column.label: i for i, column in enumerate(document.columns)}
    return [_parse_row(row, column_index) for row in document.rows]


def _parse_row(row: list[Any], column_index: dict[str, int]) -> FinancialEvent:
    def get(label: str) -> Any:
        idx = column_index.get(label)
        if idx is None or idx >= len(row):
            return None
        return row[idx]

    raw_date = get(COL_START_DATE)
    if not isinstance(raw_date, str):
        raise MissingField(
            f"Row is missing {COL_START_DATE!r}",
            context={"field": COL_START_DATE},
        )

    tz = get(COL_TIMEZONE)
    return FinancialEvent(
        earnings_date=_parse_date(raw_date),
        event_type=_event_type(get(COL_EVENT_TYPE)),
        eps_estimate=_as_float(get(COL_EPS_ESTIMATE)),
        reported_eps=_as_float(get(COL_REPORTED_EPS)),
        surprise_percent=_as_float(get(COL_SURPRISE)),
        timezone=tz if isinstance(tz, str) else None,
    )


def _parse_date(value: str) -> datetime:
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateFormat(
            f"Invalid event date: {value!r}",
            context={"value": value},
        ) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _event_type(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return EVENT_UNKNOWN
    if isinstance(value, (int, str)):
        raw = str(value)
        return _EVENT_TYPE_CODES.get(raw, raw)
    return EVENT_UNKNOWN


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None
