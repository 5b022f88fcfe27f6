"""Tests for yahoo_quotes.models.events (financial event parsing)."""

from datetime import datetime, timezone

import pytest

from yahoo_quotes.core.exceptions import DataInconsistency, InvalidDateFormat, MissingField
from yahoo_quotes.models.events import EarningsResponse, parse_financial_events


def _document(columns: list[str], rows: list[list]) -> dict:
    return {
        "finance": {
            "result": [
                {"documents": [{"columns": [{"label": c} for c in columns], "rows": rows}]}
            ],
            "error": None,
        }
    }


class TestParseFinancialEvents:
    def test_full_document(self, events_json):
        events = parse_financial_events(EarningsResponse.model_validate(events_json))
        assert len(events) == 3

        first = events[0]
        assert first.earnings_date == datetime(2024, 2, 1, 21, 30, tzinfo=timezone.utc)
        assert first.event_type == "Earnings"
        assert first.eps_estimate == 2.1
        assert first.reported_eps == 2.18
        assert first.surprise_percent == 3.81
        assert first.timezone == "EST"

    def test_event_type_codes(self, events_json):
        events = parse_financial_events(EarningsResponse.model_validate(events_json))
        assert [e.event_type for e in events] == ["Earnings", "Earnings", "Meeting"]

    def test_call_and_unknown_codes(self):
        body = _document(
            ["Event Start Date", "Event Type"],
            [["2024-01-01T00:00:00Z", 1], ["2024-01-02T00:00:00Z", 7], ["2024-01-03T00:00:00Z", None]],
        )
        events = parse_financial_events(EarningsResponse.model_validate(body))
        assert [e.event_type for e in events] == ["Call", "7", "Unknown"]

    def test_dates_with_and_without_z(self, events_json):
        events = parse_financial_events(EarningsResponse.model_validate(events_json))
        assert events[1].earnings_date == datetime(2023, 11, 2, 20, 30, tzinfo=timezone.utc)
        # No offset is read as UTC
        assert events[2].earnings_date == datetime(2023, 9, 12, 17, 0, tzinfo=timezone.utc)

    def test_missing_figures_are_none(self, events_json):
        meeting = parse_financial_events(EarningsResponse.model_validate(events_json))[2]
        assert meeting.eps_estimate is None
        assert meeting.reported_eps is None
        assert meeting.surprise_percent is None

    def test_columns_matched_by_label_not_position(self):
        body = _document(
            ["Reported EPS", "Event Type", "Event Start Date"],
            [[1.5, 2, "2024-05-02T20:30:00Z"]],
        )
        event = parse_financial_events(EarningsResponse.model_validate(body))[0]
        assert event.reported_eps == 1.5
        assert event.event_type == "Earnings"
        assert event.eps_estimate is None

    def test_empty_result(self):
        body = {"finance": {"result": [], "error": None}}
        assert parse_financial_events(EarningsResponse.model_validate(body)) == []

    def test_empty_documents(self):
        body = {"finance": {"result": [{"documents": []}], "error": None}}
        assert parse_financial_events(EarningsResponse.model_validate(body)) == []

    def test_no_columns_raises(self):
        body = _document([], [["2024-01-01T00:00:00Z"]])
        with pytest.raises(DataInconsistency):
            parse_financial_events(EarningsResponse.model_validate(body))

    def test_missing_start_date_raises(self):
        body = _document(["Event Start Date", "Event Type"], [[None, 2]])
        with pytest.raises(MissingField) as exc_info:
            parse_financial_events(EarningsResponse.model_validate(body))
        assert exc_info.value.context["field"] == "Event Start Date"

    def test_short_row_raises_missing_field(self):
        body = _document(["Event Type", "Event Start Date"], [[2]])
        with pytest.raises(MissingField):
            parse_financial_events(EarningsResponse.model_validate(body))

    def test_bad_date_raises(self):
        body = _document(["Event Start Date"], [["next tuesday"]])
        with pytest.raises(InvalidDateFormat) as exc_info:
            parse_financial_events(EarningsResponse.model_validate(body))
        assert exc_info.value.context["value"] == "next tuesday"
