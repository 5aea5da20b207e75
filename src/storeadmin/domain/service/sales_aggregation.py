"""Domain service: Sales Aggregation.

Pure functions over in-memory order lists.  They never touch a
repository, so the application layer decides which orders to load and
these functions decide how to slice and sum them.

All ranges are inclusive on both ends and expressed as timezone-aware
datetimes; an order's ``ordered_at`` is converted to the range's timezone
before it is assigned to a bucket.  Cancelled orders never count as sales.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from decimal import Decimal
from enum import Enum

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.category import Category
from storeadmin.domain.model.order import Order
from storeadmin.domain.model.product import Product

ZERO = Decimal("0.00")

# Fixed chart order for the weekly view, Sunday first.
WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
HOUR_LABELS = tuple(f"{hour:02d}" for hour in range(24))

UNCATEGORIZED = "Uncategorized"


class Period(Enum):
    DAY = "Day"
    WEEK = "Week"
    MONTH = "Month"

    @staticmethod
    def parse(label: str) -> Period:
        for period in Period:
            if period.value.lower() == label.strip().lower():
                return period
        raise ValidationError(f"Unknown period '{label}' (expected Day, Week or Month)")


class ReportPeriod(Enum):
    """Rolling windows used by the reports page."""

    TODAY = "today"
    LAST_7_DAYS = "last7"
    THIS_MONTH = "month"

    @staticmethod
    def parse(value: ReportPeriod | str) -> ReportPeriod:
        if isinstance(value, ReportPeriod):
            return value
        for period in ReportPeriod:
            if period.value == value.strip().lower():
                return period
        raise ValidationError(f"Unknown report period '{value}' (expected today, last7 or month)")

    @property
    def lookback(self) -> timedelta:
        return {
            ReportPeriod.TODAY: timedelta(days=1),
            ReportPeriod.LAST_7_DAYS: timedelta(days=7),
            ReportPeriod.THIS_MONTH: timedelta(days=30),
        }[self]


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def tz(self) -> tzinfo:
        return self.start.tzinfo or timezone.utc


@dataclass(frozen=True)
class SalesSummary:
    period: Period
    current: DateRange
    previous: DateRange
    total: Decimal
    previous_total: Decimal
    change: Decimal
    order_count: int
    buckets: dict[str, Decimal] = field(default_factory=dict)


@dataclass
class ProductSales:
    product_id: str
    name: str
    sku: str
    units: int = 0
    revenue: Decimal = ZERO


@dataclass
class CategorySales:
    category_id: str | None
    name: str
    units: int = 0
    revenue: Decimal = ZERO


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


def _day_range(first: date, last: date, tz: tzinfo) -> DateRange:
    return DateRange(
        start=datetime.combine(first, time.min, tzinfo=tz),
        end=datetime.combine(last, time.max, tzinfo=tz),
    )


def _as_local_date(reference: date | datetime, tz: tzinfo) -> date:
    if isinstance(reference, datetime):
        if reference.tzinfo is not None:
            reference = reference.astimezone(tz)
        return reference.date()
    return reference


def period_range(period: Period, reference: date | datetime, tz: tzinfo = timezone.utc) -> DateRange:
    """Inclusive calendar range of *period* containing *reference*.

    Weeks run Monday to Sunday.
    """
    day = _as_local_date(reference, tz)
    if period is Period.DAY:
        return _day_range(day, day, tz)
    if period is Period.WEEK:
        monday = day - timedelta(days=day.weekday())
        return _day_range(monday, monday + timedelta(days=6), tz)
    first = day.replace(day=1)
    last = day.replace(day=calendar.monthrange(day.year, day.month)[1])
    return _day_range(first, last, tz)


def previous_range(period: Period, current: DateRange) -> DateRange:
    """The equal-length period immediately before *current*."""
    tz = current.tz
    first = current.start.date()
    if period is Period.DAY:
        prev = first - timedelta(days=1)
        return _day_range(prev, prev, tz)
    if period is Period.WEEK:
        return _day_range(first - timedelta(days=7), first - timedelta(days=1), tz)
    prev_last = first - timedelta(days=1)
    return _day_range(prev_last.replace(day=1), prev_last, tz)


def report_ranges(report_period: ReportPeriod, now: datetime) -> tuple[DateRange, DateRange]:
    """Current and previous windows for the reports page.

    The current window ends at *now*; the previous one is the lookback
    span right before the current window starts.
    """
    if report_period is ReportPeriod.TODAY:
        start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    elif report_period is ReportPeriod.LAST_7_DAYS:
        start = now - timedelta(days=7)
    else:
        start = datetime.combine(now.date().replace(day=1), time.min, tzinfo=now.tzinfo)
    previous = DateRange(start - report_period.lookback, start - timedelta(microseconds=1))
    return DateRange(start, now), previous


# ---------------------------------------------------------------------------
# Totals and buckets
# ---------------------------------------------------------------------------


def sales_in(orders: Iterable[Order], date_range: DateRange) -> list[Order]:
    """Non-cancelled orders placed inside *date_range*."""
    return [
        order
        for order in orders
        if not order.is_cancelled and date_range.contains(order.ordered_at)
    ]


def total_sales(orders: Iterable[Order], date_range: DateRange) -> Decimal:
    return sum((o.total.amount for o in sales_in(orders, date_range)), ZERO)


def percent_change(current: Decimal | int, previous: Decimal | int) -> Decimal:
    """Percentage change from *previous* to *current*.

    Defined as 0 when there is nothing to compare against.
    """
    current, previous = Decimal(current), Decimal(previous)
    if previous == 0:
        return Decimal("0")
    return (current - previous) / previous * 100


def average_order_value(total: Decimal, order_count: int) -> Decimal:
    if order_count == 0:
        return ZERO
    return total / order_count


def _bucket_key(period: Period, local: datetime) -> str:
    if period is Period.DAY:
        return f"{local.hour:02d}"
    if period is Period.WEEK:
        return WEEKDAY_LABELS[(local.weekday() + 1) % 7]
    return str(local.day)


def bucket_sales(orders: Iterable[Order], period: Period, date_range: DateRange) -> dict[str, Decimal]:
    """Per-bucket sales totals for *period*.

    Day: all 24 hour keys "00".."23", zero-filled.
    Week: weekday labels that have sales, in Sun..Sat order.
    Month: day-of-month keys that have sales, in day order.
    """
    totals: dict[str, Decimal] = {}
    if period is Period.DAY:
        totals = {label: ZERO for label in HOUR_LABELS}

    for order in sales_in(orders, date_range):
        key = _bucket_key(period, order.ordered_at.astimezone(date_range.tz))
        totals[key] = totals.get(key, ZERO) + order.total.amount

    if period is Period.WEEK:
        return {label: totals[label] for label in WEEKDAY_LABELS if label in totals}
    if period is Period.MONTH:
        return {key: totals[key] for key in sorted(totals, key=int)}
    return totals


def summarize_period(
    orders: Sequence[Order],
    period: Period,
    reference: date | datetime,
    tz: tzinfo = timezone.utc,
) -> SalesSummary:
    """Totals, buckets and change versus the preceding period.

    *orders* must cover both the current and the previous range.
    """
    current = period_range(period, reference, tz)
    previous = previous_range(period, current)
    total = total_sales(orders, current)
    previous_total = total_sales(orders, previous)
    return SalesSummary(
        period=period,
        current=current,
        previous=previous,
        total=total,
        previous_total=previous_total,
        change=percent_change(total, previous_total),
        order_count=len(sales_in(orders, current)),
        buckets=bucket_sales(orders, period, current),
    )


def daily_series(orders: Iterable[Order], date_range: DateRange) -> list[tuple[str, Decimal]]:
    """(ISO date, total) pairs for days with sales, oldest first."""
    totals: dict[str, Decimal] = {}
    for order in sales_in(orders, date_range):
        day = order.ordered_at.astimezone(date_range.tz).date().isoformat()
        totals[day] = totals.get(day, ZERO) + order.total.amount
    return sorted(totals.items())


# ---------------------------------------------------------------------------
# Rankings
# ---------------------------------------------------------------------------


def rank_products(orders: Iterable[Order], limit: int) -> list[ProductSales]:
    """Products ranked by revenue (sum of line subtotals), highest first.

    Ties keep the order in which products were first seen.
    """
    if limit <= 0:
        return []
    by_product: dict[str, ProductSales] = {}
    for order in orders:
        if order.is_cancelled:
            continue
        for line in order.items:
            entry = by_product.get(line.product_id)
            if entry is None:
                entry = ProductSales(line.product_id, line.product_name, line.sku)
                by_product[line.product_id] = entry
            entry.units += line.quantity.value
            entry.revenue += line.subtotal.amount
    ranked = sorted(by_product.values(), key=lambda p: p.revenue, reverse=True)
    return ranked[:limit]


def low_stock(products: Iterable[Product], threshold: int = 10, limit: int = 5) -> list[Product]:
    """Active products with stock below *threshold*, lowest stock first."""
    candidates = [p for p in products if p.is_active and p.stock < threshold]
    return sorted(candidates, key=lambda p: p.stock)[:max(limit, 0)]


def sales_by_category(
    orders: Iterable[Order],
    products: dict[str, Product],
    categories: dict[str, Category],
    date_range: DateRange,
) -> list[CategorySales]:
    """Revenue per category for orders in *date_range*, highest first."""
    by_category: dict[str | None, CategorySales] = {}
    for order in sales_in(orders, date_range):
        for line in order.items:
            product = products.get(line.product_id)
            category_id = product.category_id if product else None
            if category_id not in categories:
                category_id = None
            entry = by_category.get(category_id)
            if entry is None:
                name = categories[category_id].name if category_id else UNCATEGORIZED
                entry = CategorySales(category_id, name)
                by_category[category_id] = entry
            entry.units += line.quantity.value
            entry.revenue += line.subtotal.amount
    return sorted(by_category.values(), key=lambda c: c.revenue, reverse=True)
