"""Builds the order view models shown by the back office.

Everything here is formatting: currency strings, localized dates,
status badges, history icons and the synthesized "order created" entry
for orders that have no recorded history.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone, tzinfo

from storeadmin.application.dto import (
    ChartPointDTO,
    HistoryEntryDTO,
    OrderDetailDTO,
    OrderLineItemDTO,
    OrderSummaryDTO,
)
from storeadmin.domain.model.order import Order, OrderLineItem, OrderStatus, StatusHistoryEntry
from storeadmin.domain.model.product import Product, Variant
from storeadmin.domain.service.sales_aggregation import (
    WEEKDAY_LABELS,
    ZERO,
    Period,
    SalesSummary,
)

PLACEHOLDER_IMAGE = "/api/placeholder/80/80"

_BADGES = {
    OrderStatus.PENDING: "pending",
    OrderStatus.PROCESSING: "processing",
    OrderStatus.SHIPPED: "shipped",
    OrderStatus.COMPLETED: "completed",
    OrderStatus.CANCELLED: "cancelled",
}


def badge_class(status: OrderStatus) -> str:
    return _BADGES[status]


def history_icon(status_label: str) -> str:
    label = status_label.lower()
    if "shipped" in label:
        return "truck"
    if "payment" in label or "completed" in label:
        return "check"
    return "hourglass"


def format_date(moment: datetime, tz: tzinfo = timezone.utc) -> str:
    return moment.astimezone(tz).strftime("%d/%m/%Y")


def format_datetime(moment: datetime, tz: tzinfo = timezone.utc) -> str:
    return moment.astimezone(tz).strftime("%d %B %Y, %H:%M")


def to_summary_dto(order: Order, tz: tzinfo = timezone.utc) -> OrderSummaryDTO:
    return OrderSummaryDTO(
        id=order.id,
        order_number=order.display_number,
        customer=order.contact.full_name or "Customer",
        date=format_date(order.ordered_at, tz),
        total=str(order.total),
        status=order.status.value,
        badge=badge_class(order.status),
    )


def _history(order: Order, tz: tzinfo) -> list[HistoryEntryDTO]:
    entries = sorted(order.history, key=lambda e: e.recorded_at)
    if not entries:
        entries = [
            StatusHistoryEntry(
                status="Order created",
                description="The order has been created.",
                completed=True,
                recorded_at=order.ordered_at,
            )
        ]
    return [
        HistoryEntryDTO(
            status=entry.status,
            date=format_datetime(entry.recorded_at, tz),
            description=entry.description,
            icon="check" if entry.status == "Order created" else history_icon(entry.status),
            completed=entry.completed or entry.status == "Order created",
        )
        for entry in entries
    ]


def _line_dto(
    line: OrderLineItem,
    product: Product | None,
    variant: Variant | None,
) -> OrderLineItemDTO:
    image = (product.primary_image if product else None) or PLACEHOLDER_IMAGE
    if variant is not None and variant.image_url:
        image = variant.image_url
    sku = line.sku or (variant.sku if variant else "") or (product.sku if product else "")
    return OrderLineItemDTO(
        id=line.id,
        product_name=line.product_name or "Product",
        sku=sku or "N/A",
        details=variant.label if variant else "",
        image=image,
        quantity=line.quantity.value,
        unit_price=str(line.unit_price),
        line_total=str(line.subtotal),
    )


def to_detail_dto(
    order: Order,
    product_lookup: Callable[[str], Product | None],
    variant_lookup: Callable[[str], Variant | None],
    tz: tzinfo = timezone.utc,
) -> OrderDetailDTO:
    items = [
        _line_dto(
            line,
            product_lookup(line.product_id),
            variant_lookup(line.variant_id) if line.variant_id else None,
        )
        for line in order.items
    ]
    return OrderDetailDTO(
        id=order.id,
        order_number=order.display_number,
        status=order.status.value,
        badge=badge_class(order.status),
        customer_name=order.contact.full_name or "Customer",
        email=order.contact.email,
        phone=order.contact.phone,
        items=items,
        subtotal=str(order.subtotal),
        discount=f"-{order.discount}" if not order.discount.is_zero else str(order.discount),
        shipping=str(order.shipping_cost),
        total=str(order.total),
        payment_method=order.payment_method,
        shipping_method=order.shipping.method,
        address=order.shipping.address,
        city=order.shipping.city,
        ordered_at=format_datetime(order.ordered_at, tz),
        history=_history(order, tz),
    )


def chart_points(summary: SalesSummary) -> list[ChartPointDTO]:
    """Chart series for a summary; the weekly chart always shows all 7 days."""
    if summary.period is Period.WEEK:
        return [
            ChartPointDTO(label, summary.buckets.get(label, ZERO))
            for label in WEEKDAY_LABELS
        ]
    return [ChartPointDTO(label, amount) for label, amount in summary.buckets.items()]
