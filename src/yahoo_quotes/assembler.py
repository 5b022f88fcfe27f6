"""Quote assembler: dense, validated records from column-oriented chart JSON.

The chart endpoint returns one timestamp list plus parallel open/high/low/
close/volume arrays (each independently absent, each entry independently
null) and an optional adjusted-close array. Corporate actions come as maps
keyed by timestamp, with no ordering guarantee.

Rules:

- The whole series is rejected (``DataInconsistency``) before any indexed
  access if a price array is missing or has the wrong length.
- A point whose close is null is dropped, never zero-filled. Null open,
  high, low, volume and adjusted close default to zero.
- Events are returned sorted ascending by date.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from yahoo_quotes.core.exceptions import DataInconsistency, NoQuotes, NoResult
from yahoo_quotes.models.numbers import ZERO
from yahoo_quotes.models.quote import CapitalGain, Dividend, Quote, Split

if TYPE_CHECKING:
    from yahoo_quotes.models.chart import ChartMeta, ChartResponse, QuoteSeries

logger = logging.getLogger(__name__)

_REQUIRED_ARRAYS = ("open", "high", "low", "close", "volume")


class QuoteAssembler:
    """Turns a ``ChartResponse`` into quotes, metadata and event lists.

    Parameters
    ----------
    response : ChartResponse
        A deserialized chart response. It is never mutated.
    """

    def __init__(self, response: ChartResponse) -> None:
        self._response = response

    def check_consistency(self) -> list[QuoteSeries]:
        """Validate every result block and return the result list.

        Raises
        ------
        NoResult
            The result list is absent.
        NoQuotes
            The result list is empty, or a block has no timestamps.
        DataInconsistency
            A price array is absent, or any present array's length differs
            from the timestamp count.
        """
        result = self._response.chart.result
        if result is None:
            raise NoResult("yahoo! finance returned no result")
        if not result:
            raise NoQuotes("yahoo! finance returned an empty result list")

        for series in result:
            symbol = series.meta.symbol
            n = len(series.timestamp or [])
            if n == 0:
                raise NoQuotes(
                    f"No timestamps for {symbol}",
                    context={"symbol": symbol},
                )

            if not series.indicators.quote:
                raise DataInconsistency(
                    f"Quote block missing for {symbol}",
                    context={"symbol": symbol},
                )
            block = series.indicators.quote[0]

            for name in _REQUIRED_ARRAYS:
                values = getattr(block, name)
                if values is None:
                    raise DataInconsistency(
                        f"{name} array missing for {symbol}",
                        context={"symbol": symbol, "field": name},
                    )
                if len(values) != n:
                    raise DataInconsistency(
                        f"{name} has {len(values)} entries, expected {n} for {symbol}",
                        context={"symbol": symbol, "field": name, "length": len(values), "expected": n},
                    )

            adjclose = series.indicators.adjclose_values()
            if adjclose is not None and len(adjclose) != n:
                raise DataInconsistency(
                    f"adjclose has {len(adjclose)} entries, expected {n} for {symbol}",
                    context={"symbol": symbol, "field": "adjclose", "length": len(adjclose), "expected": n},
                )

        return result

    def get_ith_quote(self, i: int) -> Quote:
        """Return the quote at index ``i`` of the first series.

        Raises ``NoQuotes`` if the close at ``i`` is null and ``IndexError``
        if ``i`` is outside the series.
        """
        series = self.check_consistency()[0]
        n = len(series.timestamp or [])
        if not 0 <= i < n:
            raise IndexError(f"quote index {i} out of range for {n} timestamps")
        return self._quote_at(series, i)

    def quotes(self) -> list[Quote]:
        """Return every quote with a close price, in source order."""
        series = self.check_consistency()[0]
        timestamps = series.timestamp or []

        quotes: list[Quote] = []
        for i in range(len(timestamps)):
            try:
                quotes.append(self._quote_at(series, i))
            except NoQuotes:
                continue

        dropped = len(timestamps) - len(quotes)
        if dropped:
            logger.debug(
                "Dropped %d of %d points without close for %s",
                dropped, len(timestamps), series.meta.symbol,
            )
        return quotes

    def last_quote(self) -> Quote:
        """Return the latest quote that has a close price.

        Trailing points are often incomplete while a market is open, so this
        scans backward instead of taking the last array element.
        """
        series = self.check_consistency()[0]
        for i in reversed(range(len(series.timestamp or []))):
            try:
                return self._quote_at(series, i)
            except NoQuotes:
                continue
        raise NoQuotes(
            f"No quote with a close price for {series.meta.symbol}",
            context={"symbol": series.meta.symbol},
        )

    def metadata(self) -> ChartMeta:
        """Return the first result's metadata."""
        return self._first_series().meta

    def splits(self) -> list[Split]:
        """Splits in the requested period, oldest first."""
        events = self._first_series().events
        if events is None or events.splits is None:
            return []
        return sorted(events.splits.values(), key=lambda s: s.date)

    def dividends(self) -> list[Dividend]:
        """Dividends in the requested period, oldest first (ex-dividend dates)."""
        events = self._first_series().events
        if events is None or events.dividends is None:
            return []
        return sorted(events.dividends.values(), key=lambda d: d.date)

    def capital_gains(self) -> list[CapitalGain]:
        """Capital-gain distributions in the requested period, oldest first."""
        events = self._first_series().events
        if events is None or events.capital_gains is None:
            return []
        return sorted(events.capital_gains.values(), key=lambda g: g.date)

    # --- Internals ---

    def _first_series(self) -> QuoteSeries:
        result = self._response.chart.result
        if result is None:
            raise NoResult("yahoo! finance returned no result")
        if not result:
            raise NoQuotes("yahoo! finance returned an empty result list")
        return result[0]

    @staticmethod
    def _quote_at(series: QuoteSeries, i: int) -> Quote:
        """Read index ``i`` of an already consistency-checked series."""
        block = series.indicators.quote[0]

        close = block.close[i]
        if close is None:
            raise NoQuotes(
                f"No close price at index {i}",
                context={"symbol": series.meta.symbol, "index": i},
            )

        adjclose_values = series.indicators.adjclose_values()
        adjclose = adjclose_values[i] if adjclose_values is not None else None

        return Quote(
            timestamp=series.timestamp[i],
            open=_or_zero(block.open[i]),
            high=_or_zero(block.high[i]),
            low=_or_zero(block.low[i]),
            volume=block.volume[i] or 0,
            close=close,
            adjclose=_or_zero(adjclose),
        )


def _or_zero(value: float | None) -> float:
    return ZERO if value is None else value
