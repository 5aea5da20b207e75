"""Integration tests for the UpdateOrderStatus use case.

Uses in-memory fake repositories, no file I/O.
"""

from datetime import datetime, timezone

import pytest

from storeadmin.application.update_order_status import UpdateOrderStatusHandler
from storeadmin.domain.exceptions import (
    EntityNotFoundError,
    InvalidTransitionError,
    NoOpTransitionError,
    ValidationError,
)
from storeadmin.domain.model.order import ContactDetails, Order, OrderLineItem, OrderStatus
from storeadmin.domain.model.product import Product
from storeadmin.domain.model.value_objects import Money, Quantity
from tests.fakes import (
    BrokenHistoryOrderRepository,
    ExplodingProductRepository,
    FakeOrderRepository,
    FakeProductRepository,
    FlakyProductRepository,
)

NOW = datetime(2024, 5, 8, 15, 0, tzinfo=timezone.utc)


def _order(status: OrderStatus = OrderStatus.PENDING) -> Order:
    """Two lines: 3 x 10.00 and 1 x 5.00 = 35.00."""
    order = Order.create(
        id="o-1",
        order_number="1001",
        contact=ContactDetails("Ana", "Rojas"),
        items=[
            OrderLineItem("l1", "p-a", "Shirt", "SHIRT", Quantity(3), Money.of("10.00")),
            OrderLineItem("l2", "p-b", "Mug", "MUG", Quantity(1), Money.of("5.00")),
        ],
        ordered_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    order.status = status
    return order


def _products() -> list[Product]:
    return [
        Product(id="p-a", sku="SHIRT", name="Shirt", price=Money.of("10.00"), stock=5),
        Product(id="p-b", sku="MUG", name="Mug", price=Money.of("5.00"), stock=0),
    ]


def _setup(status=OrderStatus.PENDING, order_repo=None, product_repo=None):
    order_repo = order_repo or FakeOrderRepository()
    order_repo.save(_order(status))
    product_repo = product_repo or FakeProductRepository(_products())
    handler = UpdateOrderStatusHandler(order_repo, product_repo, clock=lambda: NOW)
    return handler, order_repo, product_repo


class TestStatusChange:

    def test_persists_new_status_and_timestamp(self):
        handler, order_repo, _ = _setup()
        result = handler.handle("#1001", "Shipped")

        saved = order_repo.get_by_id("o-1")
        assert saved.status == OrderStatus.SHIPPED
        assert saved.updated_at == NOW
        assert result.previous_status == "Pending"
        assert result.new_status == "Shipped"
        assert result.order_number == "#1001"

    def test_records_history_entry(self):
        handler, order_repo, _ = _setup()
        result = handler.handle("1001", OrderStatus.PROCESSING, note="Packing today")

        assert result.history_recorded
        history = order_repo.get_by_id("o-1").history
        assert [e.status for e in history] == ["Pending", "Processing"]
        assert history[-1].description == "Packing today"
        assert history[-1].recorded_at == NOW

    def test_non_cancel_transition_does_not_touch_stock(self):
        handler, _, product_repo = _setup()
        result = handler.handle("1001", "Completed")
        assert result.restock is None
        assert product_repo.adjust_calls == []

    def test_unknown_order(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            handler.handle("#4242", "Shipped")

    def test_unknown_status_label(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(ValidationError, match="Unknown order status"):
            handler.handle("1001", "Lost")
        assert order_repo.get_by_id("o-1").status == OrderStatus.PENDING


class TestCancellationRestock:

    def test_cancel_restores_exact_quantities(self):
        handler, order_repo, product_repo = _setup()
        result = handler.handle("1001", "Cancelled")

        assert product_repo.get_by_id("p-a").stock == 8
        assert product_repo.get_by_id("p-b").stock == 1
        assert result.restock_ok
        assert order_repo.get_by_id("o-1").status == OrderStatus.CANCELLED

    def test_cancel_from_shipped_also_restocks(self):
        handler, _, product_repo = _setup(OrderStatus.SHIPPED)
        handler.handle("1001", "Cancelled")
        assert product_repo.get_by_id("p-a").stock == 8

    @pytest.mark.parametrize("terminal", [OrderStatus.COMPLETED, OrderStatus.CANCELLED])
    def test_terminal_order_is_rejected_without_side_effects(self, terminal):
        handler, order_repo, product_repo = _setup(terminal)

        with pytest.raises(InvalidTransitionError):
            handler.handle("1001", "Cancelled" if terminal is OrderStatus.COMPLETED else "Pending")

        assert product_repo.adjust_calls == []
        assert product_repo.get_by_id("p-a").stock == 5
        assert order_repo.get_by_id("o-1").status == terminal
        assert order_repo.history_calls == 0

    def test_cancelling_twice_does_not_restock_twice(self):
        handler, _, product_repo = _setup()
        handler.handle("1001", "Cancelled")
        with pytest.raises(NoOpTransitionError):
            handler.handle("1001", "Cancelled")
        assert product_repo.get_by_id("p-a").stock == 8

    def test_partial_restock_failure_is_reported(self):
        handler, order_repo, product_repo = _setup()
        product_repo.delete("p-b")

        result = handler.handle("1001", "Cancelled")

        assert order_repo.get_by_id("o-1").status == OrderStatus.CANCELLED
        assert not result.restock_ok
        assert [o.target_id for o in result.restock.failed] == ["p-b"]
        assert product_repo.get_by_id("p-a").stock == 8

    def test_restock_crash_never_fails_the_status_change(self):
        product_repo = ExplodingProductRepository(_products())
        handler, order_repo, _ = _setup(product_repo=product_repo)

        result = handler.handle("1001", "Cancelled")

        assert order_repo.get_by_id("o-1").status == OrderStatus.CANCELLED
        assert result.history_recorded
        assert not result.restock_ok
        assert [o.error for o in result.restock.failed] == ["connection reset"] * 2
        # every line attempted once, no automatic retry
        assert product_repo.adjust_calls == [("product", "p-a", 3), ("product", "p-b", 1)]

    def test_transient_error_on_one_line_still_restocks_the_rest(self):
        product_repo = FlakyProductRepository(_products(), failing={"p-a"})
        handler, order_repo, _ = _setup(product_repo=product_repo)

        result = handler.handle("1001", "Cancelled")

        assert order_repo.get_by_id("o-1").status == OrderStatus.CANCELLED
        assert [o.target_id for o in result.restock.failed] == ["p-a"]
        assert [o.target_id for o in result.restock.restocked] == ["p-b"]
        assert product_repo.get_by_id("p-a").stock == 5
        assert product_repo.get_by_id("p-b").stock == 1


class TestHistoryFailure:

    def test_status_change_survives_history_failure(self):
        handler, order_repo, _ = _setup(order_repo=BrokenHistoryOrderRepository())

        result = handler.handle("1001", "Shipped")

        assert not result.history_recorded
        assert order_repo.history_calls == 1
        saved = order_repo.get_by_id("o-1")
        assert saved.status == OrderStatus.SHIPPED
        assert [e.status for e in saved.history] == ["Pending"]

    def test_cancel_with_broken_history_still_restocks(self):
        handler, _, product_repo = _setup(order_repo=BrokenHistoryOrderRepository())
        result = handler.handle("1001", "Cancelled")
        assert not result.history_recorded
        assert result.restock_ok
        assert product_repo.get_by_id("p-b").stock == 1
