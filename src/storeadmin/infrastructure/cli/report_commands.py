"""CLI commands for dashboard and report analytics."""

from __future__ import annotations

from datetime import date

import click

from storeadmin.application.dto import KpiDTO
from storeadmin.application.list_orders import RecentOrdersHandler
from storeadmin.application.sales_report import (
    CategorySalesHandler,
    DailySalesHandler,
    DashboardKPIsHandler,
    LowStockHandler,
    ReportKPIsHandler,
    SalesByPeriodHandler,
    TopProductsHandler,
)
from storeadmin.domain.exceptions import DomainException
from storeadmin.domain.model.value_objects import format_amount
from storeadmin.domain.service.sales_aggregation import Period, ReportPeriod
from storeadmin.infrastructure.bootstrap import (
    cart_repository,
    category_repository,
    order_repository,
    product_repository,
)
from storeadmin.infrastructure.settings import get_settings

PERIOD_CHOICES = [p.value for p in Period]
REPORT_PERIOD_CHOICES = [p.value for p in ReportPeriod]


def _signed(change: float, unit: str = "%") -> str:
    return f"{change:+.1f}{unit}"


def _display_kpis(kpis: KpiDTO) -> None:
    click.echo(f"Total sales:  {kpis.total_sales:>16}  ({_signed(kpis.sales_change)})")
    click.echo(f"Orders:       {kpis.order_count:>16}  ({_signed(kpis.orders_change)})")
    click.echo(f"Visitors:     {kpis.visitors:>16}  ({_signed(kpis.visitors_change)})")
    click.echo(
        f"Conversion:   {kpis.conversion_rate:>15.1f}%  ({_signed(kpis.conversion_change, ' pts')})"
    )
    if kpis.average_order_value is not None:
        click.echo(
            f"Avg. order:   {kpis.average_order_value:>16}  ({_signed(kpis.average_order_change or 0.0)})"
        )


@click.command("sales")
@click.option("--period", default="Week", show_default=True,
              type=click.Choice(PERIOD_CHOICES, case_sensitive=False))
@click.option("--date", "reference", default=None, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Any day inside the period (default: today).")
def report_sales(period: str, reference) -> None:
    """Sales for a day, week or month, bucketed for the chart."""
    settings = get_settings()
    handler = SalesByPeriodHandler(order_repo=order_repository(), tz=settings.tz)

    try:
        summary = handler.handle(period, reference.date() if reference else None)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    start, end = date.fromisoformat(summary.start[:10]), date.fromisoformat(summary.end[:10])
    click.echo(f"{summary.period} {start:%d/%m/%Y} - {end:%d/%m/%Y}")
    click.echo(f"Total: {format_amount(summary.total)} over {summary.order_count} order(s) "
               f"({_signed(summary.change)} vs. previous)")
    click.echo("-" * 40)
    for point in summary.chart:
        click.echo(f"  {point.label:<5} {format_amount(point.amount):>16}")


@click.command("top-products")
@click.option("--limit", default=5, show_default=True, type=click.IntRange(min=1))
def report_top_products(limit: int) -> None:
    """Best-selling products by revenue."""
    products = TopProductsHandler(order_repo=order_repository()).handle(limit)
    if not products:
        click.echo("No sales yet.")
        return
    click.echo(f"{'#':>2}  {'SKU':<14} {'Name':<24} {'Units':>6} {'Revenue':>14}")
    click.echo("-" * 66)
    for rank, p in enumerate(products, start=1):
        click.echo(f"{rank:>2}  {p.sku:<14} {p.name:<24} {p.units:>6} {p.revenue:>14}")


@click.command("low-stock")
@click.option("--limit", default=5, show_default=True, type=click.IntRange(min=1))
@click.option("--threshold", default=None, type=click.IntRange(min=0),
              help="Stock level considered low (default from settings).")
def report_low_stock(limit: int, threshold: int | None) -> None:
    """Active products running out of stock."""
    if threshold is None:
        threshold = get_settings().low_stock_threshold
    products = LowStockHandler(product_repo=product_repository(), threshold=threshold).handle(limit)
    if not products:
        click.echo(f"No active products below {threshold} units.")
        return
    for p in products:
        click.echo(f"{p.sku:<14} {p.name:<24} {p.stock:>4} left")


@click.command("kpis")
@click.option("--period", "report_period", default=None,
              type=click.Choice(REPORT_PERIOD_CHOICES, case_sensitive=False),
              help="Report window; omit for the dashboard (this month vs. last month).")
def report_kpis(report_period: str | None) -> None:
    """Headline figures with their change against the previous window."""
    settings = get_settings()

    try:
        if report_period is None:
            kpis = DashboardKPIsHandler(
                order_repo=order_repository(), cart_repo=cart_repository(), tz=settings.tz
            ).handle()
        else:
            kpis = ReportKPIsHandler(
                order_repo=order_repository(), cart_repo=cart_repository(), tz=settings.tz
            ).handle(report_period)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_kpis(kpis)


@click.command("daily")
@click.option("--period", "report_period", default="month", show_default=True,
              type=click.Choice(REPORT_PERIOD_CHOICES, case_sensitive=False))
def report_daily(report_period: str) -> None:
    """Sales per day for the report window."""
    handler = DailySalesHandler(order_repo=order_repository(), tz=get_settings().tz)

    try:
        points = handler.handle(report_period)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not points:
        click.echo("No sales in this period.")
        return
    for point in points:
        click.echo(f"{point.label}  {format_amount(point.amount):>16}")


@click.command("categories")
@click.option("--period", "report_period", default="month", show_default=True,
              type=click.Choice(REPORT_PERIOD_CHOICES, case_sensitive=False))
def report_categories(report_period: str) -> None:
    """Revenue per category for the report window."""
    handler = CategorySalesHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        category_repo=category_repository(),
        tz=get_settings().tz,
    )

    try:
        rows = handler.handle(report_period)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No sales in this period.")
        return
    for row in rows:
        click.echo(f"{row.name:<24} {row.units:>6} {row.revenue:>16}")


@click.command("recent")
@click.option("--limit", default=5, show_default=True, type=click.IntRange(min=1))
def report_recent(limit: int) -> None:
    """Most recent orders, as shown on the dashboard."""
    handler = RecentOrdersHandler(order_repo=order_repository(), tz=get_settings().tz)

    try:
        orders = handler.handle(limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders yet.")
        return
    for o in orders:
        click.echo(f"{o.order_number:<9} {o.customer:<24} {o.date:<12} {o.total:>14}  {o.status}")
