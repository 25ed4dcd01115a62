"""Click-based CLI for price-trends.

Thin wrapper around library modules. Zero business logic — every operation
delegates to the store, the converter, or the trend engine.
"""

from __future__ import annotations

import asyncio
import json
import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console(stderr=True)

_DIRECTION_STYLES = {"drop": "green", "increase": "red", "stable": "dim"}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run_async(coro):
    """Run an async coroutine from synchronous Click code."""
    return asyncio.run(coro)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _load_config(ctx: click.Context):
    """Load config lazily, caching on first call."""
    if "config" not in ctx.obj:
        from price_trends.core import load_config

        ctx.obj["config"] = load_config(config_path=ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _create_store(config):
    from price_trends.history import SqliteObservationStore

    return SqliteObservationStore(config.storage.sqlite_path)


def _create_converter(ctx: click.Context, config):
    from price_trends.core import CurrencyError
    from price_trends.history import StaticRateConverter

    try:
        return StaticRateConverter.from_config(
            config.currency, display_currency=ctx.obj.get("display_currency")
        )
    except CurrencyError as exc:
        raise click.UsageError(str(exc)) from exc


def _create_engine(ctx: click.Context, store):
    from price_trends.analytics import PriceTrendEngine

    config = _load_config(ctx)
    return PriceTrendEngine.from_config(config, store, _create_converter(ctx, config))


async def _resolve_product(store, product_id: str):
    product = await store.get_product(product_id)
    if product is None:
        raise click.UsageError(
            f"Unknown product '{product_id}'. Register its prices with set-product first."
        )
    return product


def _fmt_signed(value: float) -> str:
    return f"{value:+.2f}"


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    envvar="PRICE_TRENDS_CONFIG",
    default=None,
    help="Path to price-trends.yml config file.",
)
@click.option(
    "--display-currency",
    "-d",
    type=str,
    default=None,
    help="Currency to display prices in (overrides config).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.version_option(package_name="price-trends")
@click.pass_context
def cli(
    ctx: click.Context, config: str | None, display_currency: str | None, verbose: bool
) -> None:
    """Price Trends: price history charts and trend badges."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["display_currency"] = display_currency
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# set-product / import-csv
# ---------------------------------------------------------------------------


@cli.command("set-product")
@click.argument("product_id")
@click.option("--current", type=float, default=None, help="Latest known price.")
@click.option("--original", type=float, default=None, help="Listed (original) price.")
@click.option("--currency", type=str, default="SAR", show_default=True, help="Currency of both prices.")
@click.pass_context
def set_product(
    ctx: click.Context,
    product_id: str,
    current: float | None,
    original: float | None,
    currency: str,
) -> None:
    """Record a product's anchor prices."""
    from pydantic import ValidationError

    from price_trends.core import ProductReference

    try:
        product = ProductReference(
            id=product_id,
            current_price=current,
            original_price=original,
            original_currency=currency,
        )
    except ValidationError as exc:
        raise click.BadParameter(str(exc)) from exc

    store = _create_store(_load_config(ctx))
    _run_async(store.save_product(product))
    console.print(f"[green]✓[/green] Saved anchors for {product_id}")


@cli.command("import-csv")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--product-id", "-p", required=True, help="Product the rows belong to.")
@click.option(
    "--currency",
    type=str,
    default="SAR",
    show_default=True,
    help="Currency for rows without a currency column.",
)
@click.pass_context
def import_csv(ctx: click.Context, path: str, product_id: str, currency: str) -> None:
    """Import price observations from a CSV file."""
    from price_trends.history import load_csv_observations

    try:
        observations = load_csv_observations(path, default_currency=currency)
    except ValueError as exc:
        raise click.ClickException(f"Cannot import {path}: {exc}") from exc

    store = _create_store(_load_config(ctx))
    count = _run_async(store.record_observations(product_id, observations))
    console.print(f"[green]✓[/green] Imported {count} observations for {product_id}")


# ---------------------------------------------------------------------------
# chart
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("product_id")
@click.option(
    "--range",
    "-r",
    "time_range",
    type=click.Choice(["7d", "30d", "90d", "all"], case_sensitive=False),
    default="30d",
    show_default=True,
    help="Time range to chart.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format.",
)
@click.pass_context
def chart(ctx: click.Context, product_id: str, time_range: str, output_format: str) -> None:
    """Show a product's price series and statistics."""

    async def _run():
        store = _create_store(_load_config(ctx))
        product = await _resolve_product(store, product_id)
        return await _create_engine(ctx, store).get_chart_data(
            product_id, time_range.lower(), product
        )

    data = _run_async(_run())

    if output_format == "json":
        click.echo(json.dumps(data.model_dump(mode="json"), indent=2))
        return
    _output_chart_table(data)


def _output_chart_table(data) -> None:
    """Render a chart as two Rich tables: points, then statistics."""
    from price_trends.history import format_price

    if not data.has_history:
        console.print(f"[yellow]No price data for {data.product_id}.[/yellow]")
        return

    table = Table(title=f"{data.product_id} — {data.time_range.value}")
    table.add_column("Date")
    table.add_column("Price", justify="right")
    table.add_column("Source")
    for point in data.series:
        table.add_row(
            point.formatted_date,
            format_price(point.display_price, point.currency),
            "anchor" if point.synthetic else "recorded",
        )
    console.print(table)

    stats = data.stats
    summary = Table(title="Statistics")
    summary.add_column("Metric", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Lowest", format_price(stats.min, data.display_currency))
    summary.add_row("Highest", format_price(stats.max, data.display_currency))
    summary.add_row("Average", format_price(stats.avg, data.display_currency))
    summary.add_row("Change", _fmt_signed(stats.change))
    summary.add_row("Change %", f"{stats.change_percent:+.1f}%")
    console.print(summary)


# ---------------------------------------------------------------------------
# badge / history
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("product_id")
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON.")
@click.pass_context
def badge(ctx: click.Context, product_id: str, as_json: bool) -> None:
    """Show a product's trend badge."""

    async def _run():
        store = _create_store(_load_config(ctx))
        product = await _resolve_product(store, product_id)
        return await _create_engine(ctx, store).get_trend_badge(product_id, product)

    result = _run_async(_run())

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return
    style = _DIRECTION_STYLES[result.direction.value]
    click.echo(
        f"{result.direction.value} {result.percent:.0f}% "
        f"({_fmt_signed(result.change)})"
    )
    console.print(f"[{style}]{result.previous:.2f} → {result.current:.2f}[/{style}]")


@cli.command()
@click.argument("product_id")
@click.option("--limit", "-n", type=click.IntRange(min=1), default=50, show_default=True)
@click.pass_context
def history(ctx: click.Context, product_id: str, limit: int) -> None:
    """List recorded prices, newest first, with the change at each step."""

    async def _run():
        store = _create_store(_load_config(ctx))
        engine = _create_engine(ctx, store)
        return engine, await engine.get_timeline(product_id, limit=limit)

    engine, entries = _run_async(_run())
    if not entries:
        console.print(f"[yellow]No price history yet for {product_id}.[/yellow]")
        return

    table = Table(title=f"Price history — {product_id}")
    table.add_column("Recorded")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    for entry in entries:
        change = ""
        if entry.change is not None:
            style = _DIRECTION_STYLES[entry.change.direction.value]
            sign = "-" if entry.change.change < 0 else "+" if entry.change.change > 0 else ""
            change = f"[{style}]{sign}{entry.change.percent:.1f}%[/{style}]"
        table.add_row(
            entry.observed_at.strftime("%Y-%m-%d %H:%M"),
            engine.converter.format(entry.display_price),
            change,
        )
    console.print(table)
    console.print(f"{len(entries)} price update{'s' if len(entries) != 1 else ''}")


@cli.command()
@click.pass_context
def products(ctx: click.Context) -> None:
    """List every product with anchors or recorded history."""
    store = _create_store(_load_config(ctx))
    product_ids = _run_async(store.list_product_ids())
    if not product_ids:
        console.print("[yellow]No products yet.[/yellow]")
        return
    for product_id in product_ids:
        click.echo(product_id)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
