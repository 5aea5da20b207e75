"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storeadmin.domain.exceptions import EntityNotFoundError, UpstreamError
from storeadmin.domain.model.order import (
    ContactDetails,
    Order,
    OrderLineItem,
    OrderStatus,
    ShippingDetails,
    StatusHistoryEntry,
)
from storeadmin.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile, parse_timestamp

FIRST_ORDER_NUMBER = 1001


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_order_number(self) -> str:
        numbers = [
            int(raw["order_number"].lstrip("#"))
            for raw in self._file.load()
            if raw["order_number"].lstrip("#").isdigit()
        ]
        return str(max(numbers) + 1 if numbers else FIRST_ORDER_NUMBER)

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_number(self, order_number: str) -> Order | None:
        for raw in self._file.load():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._file.load()]
        orders.sort(key=lambda o: o.ordered_at, reverse=True)
        return orders

    def save(self, order: Order) -> None:
        self._file.upsert(self._to_raw(order))

    def add_history(self, order_id: str, entry: StatusHistoryEntry) -> None:
        with self._file.locked():
            orders = self._file.load()
            for raw in orders:
                if raw["id"] == order_id:
                    raw.setdefault("history", []).append(self._history_to_raw(entry))
                    break
            else:
                raise EntityNotFoundError(f"Order {order_id} not found")
            self._file.persist(orders)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _history_to_raw(entry: StatusHistoryEntry) -> dict:
        return {
            "status": entry.status,
            "description": entry.description,
            "completed": entry.completed,
            "recorded_at": entry.recorded_at.isoformat(),
        }

    @classmethod
    def _to_raw(cls, order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "status": order.status.value,
            "customer_id": order.customer_id,
            "contact": {
                "first_name": order.contact.first_name,
                "last_name": order.contact.last_name,
                "email": order.contact.email,
                "phone": order.contact.phone,
            },
            "discount": str(order.discount.amount),
            "shipping_cost": str(order.shipping_cost.amount),
            "currency": order.discount.currency,
            "payment_method": order.payment_method,
            "shipping": {
                "method": order.shipping.method,
                "address": order.shipping.address,
                "city": order.shipping.city,
                "region": order.shipping.region,
                "notes": order.shipping.notes,
                "priority": order.shipping.priority,
            },
            "ordered_at": order.ordered_at.isoformat(),
            "updated_at": order.updated_at.isoformat() if order.updated_at else None,
            "items": [
                {
                    "id": item.id,
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "product_name": item.product_name,
                    "sku": item.sku,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                }
                for item in order.items
            ],
            "history": [cls._history_to_raw(entry) for entry in order.history],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        try:
            currency = raw.get("currency", DEFAULT_CURRENCY)
            items = [
                OrderLineItem(
                    id=i["id"],
                    product_id=i["product_id"],
                    variant_id=i.get("variant_id"),
                    product_name=i.get("product_name", ""),
                    sku=i.get("sku", ""),
                    quantity=Quantity(i["quantity"]),
                    unit_price=Money(Decimal(i["unit_price"]), currency),
                )
                for i in raw["items"]
            ]
            history = [
                StatusHistoryEntry(
                    status=h["status"],
                    description=h.get("description", ""),
                    completed=h.get("completed", True),
                    recorded_at=parse_timestamp(h["recorded_at"]),
                )
                for h in raw.get("history", [])
            ]
            return Order(
                id=raw["id"],
                order_number=raw["order_number"],
                contact=ContactDetails(**raw["contact"]),
                items=items,
                status=OrderStatus(raw["status"]),
                discount=Money(Decimal(raw.get("discount", "0")), currency),
                shipping_cost=Money(Decimal(raw.get("shipping_cost", "0")), currency),
                customer_id=raw.get("customer_id"),
                payment_method=raw.get("payment_method", ""),
                shipping=ShippingDetails(**raw.get("shipping", {})),
                history=history,
                ordered_at=parse_timestamp(raw["ordered_at"]),
                updated_at=(
                    parse_timestamp(raw["updated_at"]) if raw.get("updated_at") else None
                ),
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise UpstreamError(f"Malformed order record {raw.get('id')!r}: {exc}") from exc
