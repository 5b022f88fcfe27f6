"""Option rows scraped from the public quote page HTML."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from yahoo_quotes.models.options import ScrapedOption

logger = logging.getLogger(__name__)

_TABLE_CLASS = "list-options"
_COLUMNS = 11


def parse_options_page(html: str) -> list[ScrapedOption]:
    """Extract option rows from the ``table.list-options`` of a quote page.

    The first row is the header. Each data row contributes its first eleven
    cells: name, last trade date, strike, last price, bid, ask, change,
    change %, volume, open interest, implied volatility. Numbers lose their
    thousands separators and trailing ``%``; anything unparseable becomes 0.

    Returns an empty list when the page has no options table.
    """
    soup = BeautifulSoup(html, "lxml")
    table = soup.find("table", class_=_TABLE_CLASS)
    if table is None:
        logger.debug("No options table in page")
        return []

    options: list[ScrapedOption] = []
    for row in table.find_all("tr")[1:]:
        cells = [td.get_text().strip() for td in row.find_all("td")[:_COLUMNS]]
        if len(cells) < _COLUMNS:
            logger.debug("Skipping options row with %d cells", len(cells))
            continue
        options.append(
            ScrapedOption(
                name=cells[0],
                last_trade_date=cells[1],
                strike=_to_float(cells[2]),
                last_price=_to_float(cells[3]),
                bid=_to_float(cells[4]),
                ask=_to_float(cells[5]),
                change=_to_float(cells[6]),
                change_pct=_to_float(cells[7]),
                volume=_to_int(cells[8]),
                open_interest=_to_int(cells[9]),
                impl_volatility=_to_float(cells[10]),
            )
        )
    return options


def _clean(text: str) -> str:
    return text.replace(",", "").rstrip("%")


def _to_float(text: str) -> float:
    try:
        return float(_clean(text))
    except ValueError:
        return 0.0


def _to_int(text: str) -> int:
    try:
        return int(_clean(text))
    except ValueError:
        return 0
