"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  Output DTOs hold
display-ready strings; raw Decimals are kept alongside where a caller
may still want to compute with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storeadmin.domain.service.restock_service import RestockReport


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product or variant SKU + quantity)."""

    sku: str
    quantity: int


@dataclass(frozen=True)
class CustomerSpec:
    """Input: customer details typed in by an admin or captured at checkout."""

    first_name: str
    last_name: str = ""
    email: str = ""
    phone: str = ""
    region: str = ""


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    id: str
    product_name: str
    sku: str
    details: str  # variant attributes, e.g. "Size: M, Color: Red"
    image: str
    quantity: int
    unit_price: str  # formatted, e.g. "Bs. 15.00"
    line_total: str


@dataclass(frozen=True)
class HistoryEntryDTO:
    status: str
    date: str
    description: str
    icon: str  # "truck", "check" or "hourglass"
    completed: bool


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one row of the orders table."""

    id: str
    order_number: str
    customer: str
    date: str
    total: str
    status: str
    badge: str


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderSummaryDTO]
    total_count: int


@dataclass(frozen=True)
class OrderDetailDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    order_number: str
    status: str
    badge: str
    customer_name: str
    email: str
    phone: str
    items: list[OrderLineItemDTO]
    subtotal: str
    discount: str
    shipping: str
    total: str
    payment_method: str
    shipping_method: str
    address: str
    city: str
    ordered_at: str
    history: list[HistoryEntryDTO]


@dataclass(frozen=True)
class StatusChangeResult:
    """Outcome of a status change.

    The status change itself either succeeded (this object exists) or
    raised.  Secondary effects are reported here instead of raising.
    """

    order_id: str
    order_number: str
    previous_status: str
    new_status: str
    history_recorded: bool
    restock: RestockReport | None = None

    @property
    def restock_ok(self) -> bool:
        return self.restock is None or self.restock.ok


@dataclass(frozen=True)
class ChartPointDTO:
    label: str
    amount: Decimal


@dataclass(frozen=True)
class SalesSummaryDTO:
    period: str
    start: str
    end: str
    total: Decimal
    previous_total: Decimal
    change: float
    order_count: int
    buckets: dict[str, Decimal] = field(default_factory=dict)
    chart: list[ChartPointDTO] = field(default_factory=list)


@dataclass(frozen=True)
class TopProductDTO:
    product_id: str
    name: str
    sku: str
    units: int
    revenue: str


@dataclass(frozen=True)
class LowStockDTO:
    product_id: str
    name: str
    sku: str
    stock: int
    image: str


@dataclass(frozen=True)
class CategorySalesDTO:
    name: str
    units: int
    revenue: str


@dataclass(frozen=True)
class KpiDTO:
    total_sales: str
    order_count: int
    sales_change: float
    orders_change: float
    visitors: int
    visitors_change: float
    conversion_rate: float
    conversion_change: float
    average_order_value: str | None = None
    average_order_change: float | None = None
