"""Application services: dashboard and report analytics (queries).

Handlers load the orders they need and hand them to the pure functions
in ``sales_aggregation``.  Ranking widgets degrade to an empty list when
the store cannot be read; the headline figures propagate errors.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime, timezone, tzinfo

from storeadmin.application.dto import (
    CategorySalesDTO,
    ChartPointDTO,
    KpiDTO,
    LowStockDTO,
    SalesSummaryDTO,
    TopProductDTO,
)
from storeadmin.application.order_views import PLACEHOLDER_IMAGE, chart_points
from storeadmin.domain.exceptions import DomainException
from storeadmin.domain.model.store import CartEntry
from storeadmin.domain.model.value_objects import format_amount
from storeadmin.domain.repository.category_repository import CategoryRepository
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.repository.store_repository import CartRepository
from storeadmin.domain.service.sales_aggregation import (
    DateRange,
    Period,
    ReportPeriod,
    average_order_value,
    daily_series,
    low_stock,
    percent_change,
    period_range,
    previous_range,
    rank_products,
    report_ranges,
    sales_by_category,
    sales_in,
    summarize_period,
    total_sales,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _unique_sessions(entries: Iterable[CartEntry]) -> int:
    return len({e.session_key for e in entries if e.session_key is not None})


def _rate(numerator: int, denominator: int) -> float:
    return numerator / denominator * 100 if denominator else 0.0


class SalesByPeriodHandler:
    """Sales chart: total, change versus the previous period, and buckets."""

    def __init__(
        self,
        order_repo: OrderRepository,
        tz: tzinfo = timezone.utc,
        clock: Clock = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._tz = tz
        self._clock = clock

    def handle(self, period: Period | str = Period.WEEK, reference: date | None = None) -> SalesSummaryDTO:
        if isinstance(period, str):
            period = Period.parse(period)
        reference = reference or self._clock().astimezone(self._tz).date()

        current = period_range(period, reference, self._tz)
        previous = previous_range(period, current)
        orders = self._order_repo.list_placed_between(previous.start, current.end)

        summary = summarize_period(orders, period, reference, self._tz)
        return SalesSummaryDTO(
            period=period.value,
            start=summary.current.start.isoformat(),
            end=summary.current.end.isoformat(),
            total=summary.total,
            previous_total=summary.previous_total,
            change=float(summary.change),
            order_count=summary.order_count,
            buckets=summary.buckets,
            chart=chart_points(summary),
        )


class TopProductsHandler:
    """Best-selling products by revenue."""

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, limit: int = 5) -> list[TopProductDTO]:
        try:
            orders = self._order_repo.list_all()
        except DomainException as exc:
            logger.error("Top products unavailable: %s", exc)
            return []
        return [
            TopProductDTO(
                product_id=p.product_id,
                name=p.name,
                sku=p.sku,
                units=p.units,
                revenue=format_amount(p.revenue),
            )
            for p in rank_products(orders, limit)
        ]


class LowStockHandler:

    def __init__(self, product_repo: ProductRepository, threshold: int = 10) -> None:
        self._product_repo = product_repo
        self._threshold = threshold

    def handle(self, limit: int = 5) -> list[LowStockDTO]:
        try:
            products = self._product_repo.list_all()
        except DomainException as exc:
            logger.error("Low-stock list unavailable: %s", exc)
            return []
        return [
            LowStockDTO(
                product_id=p.id,
                name=p.name,
                sku=p.sku,
                stock=p.stock,
                image=p.primary_image or PLACEHOLDER_IMAGE,
            )
            for p in low_stock(products, self._threshold, limit)
        ]


class DashboardKPIsHandler:
    """Headline cards: this month against last month.

    Unique cart sessions stand in for visitors; conversion is orders per
    cart session, and its change is reported in percentage points.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        tz: tzinfo = timezone.utc,
        clock: Clock = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._tz = tz
        self._clock = clock

    def handle(self) -> KpiDTO:
        now = self._clock().astimezone(self._tz)
        month = period_range(Period.MONTH, now, self._tz)
        current = DateRange(month.start, now)
        previous = previous_range(Period.MONTH, month)
        return _build_kpis(self._order_repo, self._cart_repo, current, previous)


class ReportKPIsHandler:
    """KPIs for the reports page, including average order value."""

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        tz: tzinfo = timezone.utc,
        clock: Clock = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._tz = tz
        self._clock = clock

    def handle(self, report_period: ReportPeriod | str = ReportPeriod.THIS_MONTH) -> KpiDTO:
        report_period = ReportPeriod.parse(report_period)
        current, previous = report_ranges(report_period, self._clock().astimezone(self._tz))
        return _build_kpis(
            self._order_repo, self._cart_repo, current, previous, with_average=True
        )


def _build_kpis(
    order_repo: OrderRepository,
    cart_repo: CartRepository,
    current: DateRange,
    previous: DateRange,
    with_average: bool = False,
) -> KpiDTO:
    orders = order_repo.list_placed_between(previous.start, current.end)
    sales, previous_sales = total_sales(orders, current), total_sales(orders, previous)
    count = len(sales_in(orders, current))
    previous_count = len(sales_in(orders, previous))

    visitors = _unique_sessions(cart_repo.list_created_between(current.start, current.end))
    previous_visitors = _unique_sessions(
        cart_repo.list_created_between(previous.start, previous.end)
    )
    conversion = _rate(count, visitors)
    previous_conversion = _rate(previous_count, previous_visitors)

    average = average_order_value(sales, count)
    previous_average = average_order_value(previous_sales, previous_count)

    return KpiDTO(
        total_sales=format_amount(sales),
        order_count=count,
        sales_change=float(percent_change(sales, previous_sales)),
        orders_change=float(percent_change(count, previous_count)),
        visitors=visitors,
        visitors_change=float(percent_change(visitors, previous_visitors)),
        conversion_rate=conversion,
        conversion_change=conversion - previous_conversion if previous_conversion else 0.0,
        average_order_value=format_amount(average) if with_average else None,
        average_order_change=(
            float(percent_change(average, previous_average)) if with_average else None
        ),
    )


class DailySalesHandler:
    """One point per day with sales, for the reports line chart."""

    def __init__(
        self,
        order_repo: OrderRepository,
        tz: tzinfo = timezone.utc,
        clock: Clock = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._tz = tz
        self._clock = clock

    def handle(self, report_period: ReportPeriod | str = ReportPeriod.THIS_MONTH) -> list[ChartPointDTO]:
        current, _ = report_ranges(ReportPeriod.parse(report_period), self._clock().astimezone(self._tz))
        orders = self._order_repo.list_placed_between(current.start, current.end)
        return [ChartPointDTO(day, total) for day, total in daily_series(orders, current)]


class CategorySalesHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        tz: tzinfo = timezone.utc,
        clock: Clock = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._category_repo = category_repo
        self._tz = tz
        self._clock = clock

    def handle(self, report_period: ReportPeriod | str = ReportPeriod.THIS_MONTH) -> list[CategorySalesDTO]:
        current, _ = report_ranges(ReportPeriod.parse(report_period), self._clock().astimezone(self._tz))
        orders = self._order_repo.list_placed_between(current.start, current.end)
        products = {p.id: p for p in self._product_repo.list_all()}
        categories = {c.id: c for c in self._category_repo.list_all()}
        return [
            CategorySalesDTO(name=c.name, units=c.units, revenue=format_amount(c.revenue))
            for c in sales_by_category(orders, products, categories, current)
        ]
