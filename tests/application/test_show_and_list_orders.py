"""Integration tests for the order queries and their view models."""

from datetime import datetime, timedelta, timezone

import pytest

from storeadmin.application.list_orders import ListOrdersHandler, RecentOrdersHandler
from storeadmin.application.order_views import PLACEHOLDER_IMAGE, history_icon
from storeadmin.application.show_order import ShowOrderHandler
from storeadmin.domain.exceptions import EntityNotFoundError, ValidationError
from storeadmin.domain.model.order import ContactDetails, Order, OrderLineItem, OrderStatus
from storeadmin.domain.model.product import Product, ProductImage, Variant
from storeadmin.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeOrderRepository, FakeProductRepository

T0 = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


def _order(n: int, first_name: str = "Ana", status=OrderStatus.PENDING, **line) -> Order:
    order = Order.create(
        id=f"o-{n}",
        order_number=str(1000 + n),
        contact=ContactDetails(first_name, "Rojas"),
        items=[OrderLineItem(
            "l1",
            line.get("product_id", "p-shirt"),
            "Shirt",
            line.get("sku", "SHIRT"),
            Quantity(2),
            Money.of("10.00"),
            variant_id=line.get("variant_id"),
        )],
        ordered_at=T0 + timedelta(days=n),
    )
    order.status = status
    return order


class TestShowOrder:

    def _handler(self, orders):
        product = Product(
            id="p-shirt", sku="SHIRT", name="Shirt", price=Money.of("10"),
            images=[ProductImage("https://img/2.jpg", position=2),
                    ProductImage("https://img/1.jpg", is_primary=True, position=5)],
        )
        variant = Variant(id="v-m", product_id="p-shirt", sku="SHIRT-M",
                          attributes={"Size": "M", "Color": "Red"})
        return ShowOrderHandler(FakeOrderRepository(orders),
                                FakeProductRepository([product], [variant]))

    def test_by_number_with_hash(self):
        dto = self._handler([_order(1)]).handle("#1001")
        assert dto.order_number == "#1001"
        assert dto.total == "Bs. 20.00"
        assert dto.discount == "Bs. 0.00"
        assert dto.badge == "pending"

    def test_line_uses_primary_image(self):
        dto = self._handler([_order(1)]).handle("1001")
        assert dto.items[0].image == "https://img/1.jpg"
        assert dto.items[0].line_total == "Bs. 20.00"

    def test_variant_details(self):
        dto = self._handler([_order(1, variant_id="v-m", sku="SHIRT-M")]).handle("1001")
        assert dto.items[0].details == "Size: M, Color: Red"

    def test_missing_product_falls_back(self):
        dto = self._handler([_order(1, product_id="p-gone", sku="")]).handle("1001")
        assert dto.items[0].image == PLACEHOLDER_IMAGE
        assert dto.items[0].sku == "N/A"

    def test_history_is_listed(self):
        dto = self._handler([_order(1)]).handle("1001")
        assert [h.status for h in dto.history] == ["Pending"]
        assert dto.history[0].date == "01 May 2024, 09:00"

    def test_order_without_history_gets_created_entry(self):
        order = _order(1)
        order.history = []
        dto = self._handler([order]).handle("1001")
        assert len(dto.history) == 1
        assert dto.history[0].status == "Order created"
        assert dto.history[0].completed
        assert dto.history[0].icon == "check"

    def test_not_found(self):
        with pytest.raises(EntityNotFoundError):
            self._handler([]).handle("#1001")


class TestHistoryIcon:

    @pytest.mark.parametrize("label, icon", [
        ("Shipped", "truck"),
        ("Payment received", "check"),
        ("Completed", "check"),
        ("Processing", "hourglass"),
    ])
    def test_icons(self, label, icon):
        assert history_icon(label) == icon


class TestListOrders:

    def _repo(self):
        return FakeOrderRepository([
            _order(1, "Ana"),
            _order(2, "Bruno", OrderStatus.SHIPPED),
            _order(3, "Carla", OrderStatus.CANCELLED),
            _order(4, "Ana", OrderStatus.SHIPPED),
        ])

    def test_newest_first(self):
        page = ListOrdersHandler(self._repo()).handle()
        assert [o.order_number for o in page.orders] == ["#1004", "#1003", "#1002", "#1001"]
        assert page.total_count == 4

    def test_all_means_no_filter(self):
        assert ListOrdersHandler(self._repo()).handle(status="All").total_count == 4

    def test_status_filter(self):
        page = ListOrdersHandler(self._repo()).handle(status="shipped")
        assert [o.order_number for o in page.orders] == ["#1004", "#1002"]
        assert all(o.badge == "shipped" for o in page.orders)

    def test_search_by_name_or_number(self):
        handler = ListOrdersHandler(self._repo())
        assert handler.handle(search="ana").total_count == 2
        assert [o.order_number for o in handler.handle(search="#1003").orders] == ["#1003"]

    def test_pagination_keeps_total(self):
        page = ListOrdersHandler(self._repo()).handle(limit=2, offset=1)
        assert [o.order_number for o in page.orders] == ["#1003", "#1002"]
        assert page.total_count == 4

    def test_negative_offset_rejected(self):
        with pytest.raises(ValidationError):
            ListOrdersHandler(self._repo()).handle(offset=-1)

    def test_recent(self):
        recent = RecentOrdersHandler(self._repo()).handle(limit=2)
        assert [o.order_number for o in recent] == ["#1004", "#1003"]
        assert recent[0].date == "05/05/2024"
