"""Click-based CLI for yahoo-quotes.

Thin wrapper around the connector. Every command opens one
``YahooConnector``, makes its calls and renders the result with rich.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timedelta, timezone

import click
from rich.console import Console
from rich.table import Table

from yahoo_quotes.core.exceptions import YahooQuotesError

console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from yahoo_quotes.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _with_connector(ctx: click.Context, call):
    """Run ``call(connector)`` on a fresh connector; errors exit with status 1."""
    async def _run():
        from yahoo_quotes.client import YahooConnector

        config = _load_config(ctx)
        async with YahooConnector(config.connector) as yahoo:
            return await call(yahoo)

    try:
        return _run_async(_run())
    except YahooQuotesError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise SystemExit(1) from exc


def _fmt_ts(ts: int | None) -> str:
    if ts is None:
        return ""
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _fmt_num(value: float | None, spec: str = ".2f") -> str:
    return "" if value is None else format(value, spec)


def _output_quotes(quotes, title: str, output_format: str) -> None:
    if output_format == "json":
        click.echo(json.dumps([q.model_dump() for q in quotes], indent=2))
        return

    table = Table(title=title)
    table.add_column("Time (UTC)", style="bold")
    for name in ("Open", "High", "Low", "Close", "Adj Close", "Volume"):
        table.add_column(name, justify="right")

    for q in quotes:
        table.add_row(
            _fmt_ts(q.timestamp),
            _fmt_num(q.open),
            _fmt_num(q.high),
            _fmt_num(q.low),
            _fmt_num(q.close),
            _fmt_num(q.adjclose),
            f"{q.volume:,}",
        )
    console.print(table)


_FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="YAHOO_QUOTES_CONFIG",
    default=None,
    help="Path to yahoo-quotes.yml config file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable debug logging.",
)
@click.version_option(package_name="yahoo-quotes")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """yahoo-quotes: quotes, history and company data from yahoo! finance."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("symbol")
@click.option("--interval", "-i", default="1d", help="Bar interval, e.g. 1m, 1h, 1d.")
@_FORMAT_OPTION
@click.pass_context
def quote(ctx: click.Context, symbol: str, interval: str, output_format: str) -> None:
    """Show the latest quote with a close price."""
    response = _with_connector(ctx, lambda y: y.get_latest_quotes(symbol, interval))
    try:
        last = response.last_quote()
    except YahooQuotesError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise SystemExit(1) from exc
    _output_quotes([last], f"{symbol.upper()} latest", output_format)


@cli.command()
@click.argument("symbol")
@click.option(
    "--start",
    "-s",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    required=True,
    help="First day (YYYY-MM-DD, UTC).",
)
@click.option(
    "--end",
    "-e",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    required=True,
    help="Last day (YYYY-MM-DD, UTC), included.",
)
@click.option("--interval", "-i", default="1d", help="Bar interval.")
@click.option("--prepost", is_flag=True, default=False, help="Include extended hours.")
@_FORMAT_OPTION
@click.pass_context
def history(
    ctx: click.Context,
    symbol: str,
    start: datetime,
    end: datetime,
    interval: str,
    prepost: bool,
    output_format: str,
) -> None:
    """Show quotes between two dates."""
    # Upstream treats period2 as exclusive
    until = end + timedelta(days=1)

    async def _fetch(yahoo):
        if prepost:
            return await yahoo.get_quote_history_interval_prepost(
                symbol, start, until, interval, True
            )
        return await yahoo.get_quote_history_interval(symbol, start, until, interval)

    response = _with_connector(ctx, _fetch)
    _print_series(response, symbol, output_format)


@cli.command(name="range")
@click.argument("symbol")
@click.option("--range", "-r", "period", default="1mo", help="Named range, e.g. 5d, 1y, max.")
@click.option("--interval", "-i", default="1d", help="Bar interval.")
@click.option("--prepost", is_flag=True, default=False, help="Include extended hours.")
@_FORMAT_OPTION
@click.pass_context
def range_(
    ctx: click.Context,
    symbol: str,
    period: str,
    interval: str,
    prepost: bool,
    output_format: str,
) -> None:
    """Show quotes over a named range."""
    response = _with_connector(
        ctx, lambda y: y.get_quote_period_interval(symbol, period, interval, prepost)
    )
    _print_series(response, symbol, output_format)


def _print_series(response, symbol: str, output_format: str) -> None:
    try:
        quotes = response.quotes()
    except YahooQuotesError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise SystemExit(1) from exc
    if not quotes:
        console.print(f"[yellow]No quotes for {symbol}.[/yellow]")
        return
    _output_quotes(quotes, f"{symbol.upper()} ({len(quotes)} quotes)", output_format)


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("name")
@click.pass_context
def search(ctx: click.Context, name: str) -> None:
    """Search tickers by company or fund name."""
    result = _with_connector(ctx, lambda y: y.search_ticker(name))
    if not result.quotes:
        console.print(f"[yellow]No matches for {name!r}.[/yellow]")
        return

    table = Table(title=f"Matches for {name!r}")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Exchange")
    table.add_column("Score", justify="right")
    for item in result.quotes:
        table.add_row(
            item.symbol,
            item.long_name or item.short_name,
            item.type_display,
            item.exchange,
            f"{item.score:,.0f}",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# Corporate actions
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("symbol")
@click.option("--range", "-r", "period", default="5y", help="Named range to scan.")
@click.pass_context
def dividends(ctx: click.Context, symbol: str, period: str) -> None:
    """List dividends (ex-dividend dates), oldest first."""
    response = _with_connector(ctx, lambda y: y.get_quote_range(symbol, "1d", period))
    try:
        items = response.dividends()
    except YahooQuotesError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise SystemExit(1) from exc
    if not items:
        console.print(f"[yellow]No dividends for {symbol} in {period}.[/yellow]")
        return

    table = Table(title=f"{symbol.upper()} dividends")
    table.add_column("Ex-date", style="bold")
    table.add_column("Amount", justify="right")
    for d in items:
        table.add_row(_fmt_ts(d.date), _fmt_num(d.amount, ".4f"))
    console.print(table)


@cli.command()
@click.argument("symbol")
@click.option("--range", "-r", "period", default="max", help="Named range to scan.")
@click.pass_context
def splits(ctx: click.Context, symbol: str, period: str) -> None:
    """List stock splits, oldest first."""
    response = _with_connector(ctx, lambda y: y.get_quote_range(symbol, "1d", period))
    try:
        items = response.splits()
    except YahooQuotesError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise SystemExit(1) from exc
    if not items:
        console.print(f"[yellow]No splits for {symbol} in {period}.[/yellow]")
        return

    table = Table(title=f"{symbol.upper()} splits")
    table.add_column("Date", style="bold")
    table.add_column("Ratio", justify="right")
    for s in items:
        table.add_row(_fmt_ts(s.date), s.split_ratio)
    console.print(table)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("symbol")
@click.pass_context
def info(ctx: click.Context, symbol: str) -> None:
    """Show company profile and key statistics."""
    response = _with_connector(ctx, lambda y: y.get_ticker_info(symbol))
    summary = response.first()
    if summary is None:
        console.print(f"[yellow]No summary for {symbol}.[/yellow]")
        return

    table = Table(title=f"{symbol.upper()} profile")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    if summary.quote_type is not None:
        table.add_row("Name", summary.quote_type.long_name or summary.quote_type.short_name or "")
        table.add_row("Exchange", summary.quote_type.exchange or "")
    if summary.asset_profile is not None:
        table.add_row("Sector", summary.asset_profile.sector or "")
        table.add_row("Industry", summary.asset_profile.industry or "")
        table.add_row("Website", summary.asset_profile.website or "")
    if summary.financial_data is not None:
        table.add_row("Price", _fmt_num(summary.financial_data.current_price))
        table.add_row("Recommendation", summary.financial_data.recommendation_key or "")
    if summary.summary_detail is not None:
        table.add_row("Market cap", f"{summary.summary_detail.market_cap or 0:,}")
        table.add_row("Trailing P/E", _fmt_num(summary.summary_detail.trailing_pe))
        table.add_row("Forward P/E", _fmt_num(summary.summary_detail.forward_pe))
    console.print(table)


@cli.command()
@click.argument("symbol")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=12, help="Maximum events.")
@click.option("--earnings-only", is_flag=True, default=False, help="Skip meetings and calls.")
@click.pass_context
def events(ctx: click.Context, symbol: str, limit: int, earnings_only: bool) -> None:
    """List earnings dates, meetings and calls, newest first."""
    if earnings_only:
        items = _with_connector(ctx, lambda y: y.get_earnings_only(symbol, limit))
    else:
        items = _with_connector(ctx, lambda y: y.get_financial_events(symbol, limit))
    if not items:
        console.print(f"[yellow]No events for {symbol}.[/yellow]")
        return

    table = Table(title=f"{symbol.upper()} events")
    table.add_column("Date", style="bold")
    table.add_column("Type")
    table.add_column("EPS est.", justify="right")
    table.add_column("EPS actual", justify="right")
    table.add_column("Surprise %", justify="right")
    for e in items:
        table.add_row(
            e.earnings_date.strftime("%Y-%m-%d %H:%M"),
            e.event_type,
            _fmt_num(e.eps_estimate),
            _fmt_num(e.reported_eps),
            _fmt_num(e.surprise_percent),
        )
    console.print(table)


@cli.command()
@click.argument("symbol")
@click.option("--scrape", is_flag=True, default=False, help="Read the public quote page instead.")
@click.pass_context
def options(ctx: click.Context, symbol: str, scrape: bool) -> None:
    """Show the option chain for the nearest expiry."""
    if scrape:
        rows = _with_connector(ctx, lambda y: y.scrape_options(symbol))
        if not rows:
            console.print(f"[yellow]No options table for {symbol}.[/yellow]")
            return
        table = Table(title=f"{symbol.upper()} options")
        table.add_column("Contract", style="bold")
        table.add_column("Strike", justify="right")
        table.add_column("Last", justify="right")
        table.add_column("Bid", justify="right")
        table.add_column("Ask", justify="right")
        table.add_column("Volume", justify="right")
        table.add_column("IV %", justify="right")
        for r in rows:
            table.add_row(
                r.name,
                _fmt_num(r.strike),
                _fmt_num(r.last_price),
                _fmt_num(r.bid),
                _fmt_num(r.ask),
                f"{r.volume:,}",
                _fmt_num(r.impl_volatility),
            )
        console.print(table)
        return

    chain = _with_connector(ctx, lambda y: y.get_options(symbol))
    table = Table(title=f"{chain.underlying_symbol} options")
    table.add_column("Side", style="bold")
    table.add_column("Contract")
    table.add_column("Strike", justify="right")
    table.add_column("Last", justify="right")
    table.add_column("Bid", justify="right")
    table.add_column("Ask", justify="right")
    table.add_column("Open int.", justify="right")
    for side, contracts in (("call", chain.calls), ("put", chain.puts)):
        for c in contracts:
            table.add_row(
                side,
                c.contract_symbol,
                _fmt_num(c.strike),
                _fmt_num(c.last_price),
                _fmt_num(c.bid),
                _fmt_num(c.ask),
                str(c.open_interest or 0),
            )
    console.print(table)
