"""Point-in-time quote and corporate-action event models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from yahoo_quotes.models.base import UpstreamModel
from yahoo_quotes.models.numbers import Decimal


class Quote(BaseModel):
    """A single OHLCV quote plus adjusted close at one Unix timestamp.

    Produced by the quote assembler. ``close`` is always a real upstream
    value; the other prices and the volume default to zero when upstream
    sent null.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: int
    open: Decimal
    high: Decimal
    low: Decimal
    volume: int
    close: Decimal
    adjclose: Decimal


class Split(UpstreamModel):
    """A stock split.

    A 1:5 split gives five shares for every share held before: numerator 1,
    denominator 5. A reverse split has numerator > denominator.
    """

    date: int
    numerator: Decimal
    denominator: Decimal
    split_ratio: str


class Dividend(UpstreamModel):
    """A dividend payment; ``date`` is the ex-dividend date."""

    amount: Decimal
    date: int


class CapitalGain(UpstreamModel):
    """A capital-gain distribution (mutual funds only)."""

    amount: float
    date: int
