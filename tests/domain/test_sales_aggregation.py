"""Unit tests for the sales aggregation functions."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.category import Category
from storeadmin.domain.model.order import ContactDetails, Order, OrderLineItem, OrderStatus
from storeadmin.domain.model.product import Product, ProductStatus
from storeadmin.domain.model.value_objects import Money, Quantity
from storeadmin.domain.service.sales_aggregation import (
    HOUR_LABELS,
    Period,
    ReportPeriod,
    bucket_sales,
    daily_series,
    low_stock,
    percent_change,
    period_range,
    previous_range,
    rank_products,
    report_ranges,
    sales_by_category,
    summarize_period,
    total_sales,
)

UTC = timezone.utc
WEDNESDAY = date(2024, 5, 8)


def _at(y, m, d, hour=12, tz=UTC) -> datetime:
    return datetime(y, m, d, hour, 0, tzinfo=tz)


def _order(
    total: str,
    ordered_at: datetime,
    status: OrderStatus = OrderStatus.PENDING,
    product_id: str = "p1",
    qty: int = 1,
) -> Order:
    amount = Money.of(total)
    order = Order.create(
        id=f"o-{ordered_at.isoformat()}-{product_id}",
        order_number="1001",
        contact=ContactDetails("Ana"),
        items=[OrderLineItem("l1", product_id, product_id.upper(), product_id.upper(),
                             Quantity(1), amount)],
        ordered_at=ordered_at,
    )
    if qty != 1:
        order.items = [
            OrderLineItem("l1", product_id, product_id.upper(), product_id.upper(),
                          Quantity(qty), Money(amount.amount / qty))
        ]
    order.status = status
    return order


class TestRanges:

    def test_day(self):
        r = period_range(Period.DAY, WEDNESDAY)
        assert r.start == datetime(2024, 5, 8, 0, 0, tzinfo=UTC)
        assert r.end.date() == WEDNESDAY
        assert r.end.hour == 23 and r.end.minute == 59

    def test_week_runs_monday_to_sunday(self):
        r = period_range(Period.WEEK, WEDNESDAY)
        assert r.start.date() == date(2024, 5, 6)
        assert r.end.date() == date(2024, 5, 12)

    def test_month(self):
        r = period_range(Period.MONTH, date(2024, 2, 14))
        assert r.start.date() == date(2024, 2, 1)
        assert r.end.date() == date(2024, 2, 29)

    def test_previous_ranges(self):
        week = period_range(Period.WEEK, WEDNESDAY)
        prev = previous_range(Period.WEEK, week)
        assert (prev.start.date(), prev.end.date()) == (date(2024, 4, 29), date(2024, 5, 5))

        march = period_range(Period.MONTH, date(2024, 3, 31))
        prev = previous_range(Period.MONTH, march)
        assert (prev.start.date(), prev.end.date()) == (date(2024, 2, 1), date(2024, 2, 29))

        day = period_range(Period.DAY, date(2024, 1, 1))
        assert previous_range(Period.DAY, day).start.date() == date(2023, 12, 31)

    def test_reference_datetime_is_read_in_range_timezone(self):
        la_paz = ZoneInfo("America/La_Paz")
        # 02:00 UTC on Thursday is still Wednesday evening in La Paz
        r = period_range(Period.DAY, datetime(2024, 5, 9, 2, 0, tzinfo=UTC), la_paz)
        assert r.start.date() == WEDNESDAY

    def test_period_parse(self):
        assert Period.parse("week") is Period.WEEK
        with pytest.raises(ValidationError, match="Unknown period"):
            Period.parse("Year")


class TestTotals:

    def test_week_scenario(self):
        orders = [
            _order("20.00", _at(2024, 5, 6)),   # Monday
            _order("30.00", _at(2024, 5, 8)),   # Wednesday
            _order("99.00", _at(2024, 5, 4)),   # prior Saturday
        ]
        week = period_range(Period.WEEK, WEDNESDAY)
        assert total_sales(orders, week) == Decimal("50.00")
        assert bucket_sales(orders, Period.WEEK, week) == {
            "Mon": Decimal("20.00"),
            "Wed": Decimal("30.00"),
        }

    def test_cancelled_orders_do_not_count(self):
        orders = [
            _order("20.00", _at(2024, 5, 6)),
            _order("70.00", _at(2024, 5, 7), status=OrderStatus.CANCELLED),
        ]
        week = period_range(Period.WEEK, WEDNESDAY)
        assert total_sales(orders, week) == Decimal("20.00")
        assert "Tue" not in bucket_sales(orders, Period.WEEK, week)

    def test_week_buckets_follow_sunday_first_order(self):
        orders = [
            _order("5", _at(2024, 5, 12)),  # Sunday
            _order("3", _at(2024, 5, 10)),  # Friday
            _order("1", _at(2024, 5, 6)),   # Monday
        ]
        week = period_range(Period.WEEK, WEDNESDAY)
        assert list(bucket_sales(orders, Period.WEEK, week)) == ["Sun", "Mon", "Fri"]

    def test_day_has_all_24_hours(self):
        orders = [_order("12.50", _at(2024, 5, 8, hour=9))]
        buckets = bucket_sales(orders, Period.DAY, period_range(Period.DAY, WEDNESDAY))
        assert list(buckets) == list(HOUR_LABELS)
        assert len(buckets) == 24
        assert buckets["09"] == Decimal("12.50")
        assert buckets["00"] == Decimal("0")

    def test_empty_day_is_all_zero(self):
        buckets = bucket_sales([], Period.DAY, period_range(Period.DAY, WEDNESDAY))
        assert len(buckets) == 24
        assert sum(buckets.values()) == 0

    def test_month_keys_are_days_with_orders(self):
        orders = [
            _order("10", _at(2024, 5, 21)),
            _order("4", _at(2024, 5, 3)),
            _order("6", _at(2024, 5, 3, hour=18)),
        ]
        buckets = bucket_sales(orders, Period.MONTH, period_range(Period.MONTH, WEDNESDAY))
        assert buckets == {"3": Decimal("10"), "21": Decimal("10")}

    def test_buckets_use_local_time(self):
        la_paz = ZoneInfo("America/La_Paz")
        # 03:00 UTC Thursday = 23:00 Wednesday in La Paz (UTC-4)
        orders = [_order("8", datetime(2024, 5, 9, 3, 0, tzinfo=UTC))]
        day = period_range(Period.DAY, WEDNESDAY, la_paz)
        assert bucket_sales(orders, Period.DAY, day)["23"] == Decimal("8")

    def test_summary_compares_with_previous_period(self):
        orders = [
            _order("50", _at(2024, 5, 6)),
            _order("25", _at(2024, 4, 30)),
        ]
        summary = summarize_period(orders, Period.WEEK, WEDNESDAY)
        assert summary.total == Decimal("50")
        assert summary.previous_total == Decimal("25")
        assert summary.change == Decimal("100")
        assert summary.order_count == 1


class TestPercentChange:

    def test_same_value_is_zero(self):
        assert percent_change(Decimal("42"), Decimal("42")) == 0

    def test_previous_zero_is_zero(self):
        assert percent_change(Decimal("100"), 0) == 0
        assert percent_change(0, 0) == 0

    def test_drop(self):
        assert percent_change(30, 40) == Decimal("-25")


class TestReportRanges:

    NOW = datetime(2024, 5, 15, 14, 30, tzinfo=UTC)

    def test_today(self):
        current, previous = report_ranges(ReportPeriod.TODAY, self.NOW)
        assert current.start == datetime(2024, 5, 15, tzinfo=UTC)
        assert current.end == self.NOW
        assert previous.start == datetime(2024, 5, 14, tzinfo=UTC)
        assert previous.end < current.start

    def test_last_seven_days(self):
        current, previous = report_ranges(ReportPeriod.LAST_7_DAYS, self.NOW)
        assert current.start == self.NOW - timedelta(days=7)
        assert previous.start == self.NOW - timedelta(days=14)

    def test_this_month(self):
        current, previous = report_ranges(ReportPeriod.THIS_MONTH, self.NOW)
        assert current.start == datetime(2024, 5, 1, tzinfo=UTC)
        assert previous.start == datetime(2024, 4, 1, tzinfo=UTC)

    def test_parse(self):
        assert ReportPeriod.parse("LAST7") is ReportPeriod.LAST_7_DAYS
        with pytest.raises(ValidationError, match="Unknown report period"):
            ReportPeriod.parse("year")


class TestRankProducts:

    def _orders(self):
        return [
            _order("100", _at(2024, 5, 6), product_id="a"),
            _order("50", _at(2024, 5, 6), product_id="b", qty=5),
            _order("150", _at(2024, 5, 7), product_id="c"),
        ]

    def test_ranked_by_revenue(self):
        ranked = rank_products(self._orders(), limit=2)
        assert [p.product_id for p in ranked] == ["c", "a"]

    def test_units_are_summed(self):
        ranked = rank_products(self._orders(), limit=3)
        assert {p.product_id: p.units for p in ranked} == {"c": 1, "a": 1, "b": 5}

    def test_ties_keep_first_seen_order(self):
        orders = [
            _order("10", _at(2024, 5, 6), product_id="x"),
            _order("10", _at(2024, 5, 6), product_id="y"),
        ]
        assert [p.product_id for p in rank_products(orders, 5)] == ["x", "y"]

    def test_cancelled_orders_are_skipped(self):
        orders = self._orders() + [
            _order("500", _at(2024, 5, 7), status=OrderStatus.CANCELLED, product_id="b"),
        ]
        assert rank_products(orders, 1)[0].product_id == "c"

    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, limit):
        assert rank_products(self._orders(), limit) == []


class TestLowStock:

    def test_active_products_below_threshold_lowest_first(self):
        products = [
            Product(id="1", sku="A", name="A", price=Money.of("1"), stock=8),
            Product(id="2", sku="B", name="B", price=Money.of("1"), stock=2),
            Product(id="3", sku="C", name="C", price=Money.of("1"), stock=10),
            Product(id="4", sku="D", name="D", price=Money.of("1"), stock=0,
                    status=ProductStatus.INACTIVE),
        ]
        assert [p.sku for p in low_stock(products, threshold=10)] == ["B", "A"]

    def test_limit(self):
        products = [
            Product(id=str(i), sku=f"S{i}", name="X", price=Money.of("1"), stock=i)
            for i in range(8)
        ]
        assert len(low_stock(products, limit=5)) == 5


class TestDailyAndCategories:

    def test_daily_series(self):
        orders = [
            _order("10", _at(2024, 5, 9)),
            _order("5", _at(2024, 5, 2)),
            _order("7", _at(2024, 5, 9, hour=20)),
        ]
        month = period_range(Period.MONTH, WEDNESDAY)
        assert daily_series(orders, month) == [
            ("2024-05-02", Decimal("5")),
            ("2024-05-09", Decimal("17")),
        ]

    def test_sales_by_category(self):
        products = {
            "p1": Product(id="p1", sku="P1", name="P1", price=Money.of("1"), category_id="c1"),
            "p2": Product(id="p2", sku="P2", name="P2", price=Money.of("1"), category_id="gone"),
        }
        categories = {"c1": Category(id="c1", name="Shirts", slug="shirts")}
        orders = [
            _order("10", _at(2024, 5, 6), product_id="p1"),
            _order("40", _at(2024, 5, 6), product_id="p2"),
            _order("3", _at(2024, 5, 6), product_id="unknown"),
        ]
        rows = sales_by_category(orders, products, categories, period_range(Period.MONTH, WEDNESDAY))
        assert [(r.name, r.revenue) for r in rows] == [
            ("Uncategorized", Decimal("43")),
            ("Shirts", Decimal("10")),
        ]
