"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items and its
status history.  The status state machine is enforced here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storeadmin.domain.exceptions import (
    InvalidTransitionError,
    NoOpTransitionError,
    ValidationError,
)
from storeadmin.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @staticmethod
    def parse(label: str) -> OrderStatus:
        """Resolve a status from its label, case-insensitively."""
        for status in OrderStatus:
            if status.value.lower() == label.strip().lower():
                return status
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Unknown order status '{label}' (expected one of {allowed})")


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

DEFAULT_STATUS_DESCRIPTIONS = {
    OrderStatus.PENDING: "The order has been created.",
    OrderStatus.PROCESSING: "The order is being prepared.",
    OrderStatus.SHIPPED: "The order has been shipped.",
    OrderStatus.COMPLETED: "The order has been delivered.",
    OrderStatus.CANCELLED: "The order has been cancelled.",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ContactDetails:
    """Customer contact snapshot captured on the order."""

    first_name: str
    last_name: str = ""
    email: str = ""
    phone: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class ShippingDetails:
    method: str = "Standard shipping"
    address: str = ""
    city: str = ""
    region: str = ""
    notes: str = ""
    priority: bool = False


@dataclass(frozen=True)
class OrderLineItem:
    """One product/variant line, with the price locked at purchase time."""

    id: str
    product_id: str
    product_name: str
    sku: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    variant_id: str | None = None

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class StatusHistoryEntry:
    status: str
    description: str
    completed: bool
    recorded_at: datetime


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The repository reconstitutes persisted orders through
    ``__init__`` without re-validating.
    """

    id: str
    order_number: str
    contact: ContactDetails
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    discount: Money = field(default_factory=Money.zero)
    shipping_cost: Money = field(default_factory=Money.zero)
    customer_id: str | None = None
    payment_method: str = ""
    shipping: ShippingDetails = field(default_factory=ShippingDetails)
    history: list[StatusHistoryEntry] = field(default_factory=list)
    ordered_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        id: str,
        order_number: str,
        contact: ContactDetails,
        items: list[OrderLineItem],
        discount: Money | None = None,
        shipping_cost: Money | None = None,
        **details,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not contact.first_name or not contact.first_name.strip():
            raise ValidationError("Customer name is required")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        order = Order(
            id=id,
            order_number=order_number.lstrip("#"),
            contact=contact,
            items=list(items),
            discount=discount or Money.zero(),
            shipping_cost=shipping_cost or Money.zero(),
            **details,
        )

        if order.discount.exceeds(order.subtotal):
            raise ValidationError(
                f"Discount {order.discount} exceeds order subtotal {order.subtotal}"
            )

        order.history.append(
            StatusHistoryEntry(
                status=OrderStatus.PENDING.value,
                description=DEFAULT_STATUS_DESCRIPTIONS[OrderStatus.PENDING],
                completed=False,
                recorded_at=order.ordered_at,
            )
        )
        return order

    # --- State transitions ----------------------------------------------------

    def change_status(
        self,
        new_status: OrderStatus,
        note: str | None = None,
        at: datetime | None = None,
    ) -> StatusHistoryEntry:
        """Move the order to *new_status*.

        ``Completed`` and ``Cancelled`` are terminal.  Returns the history
        entry describing the change; recording it is left to the caller so
        a failure to persist history never blocks the status change.
        """
        if self.status.is_terminal:
            raise InvalidTransitionError(
                f"Order #{self.order_number} is {self.status.value} "
                f"and cannot change status"
            )
        if new_status == self.status:
            raise NoOpTransitionError(
                f"Order #{self.order_number} is already {self.status.value}"
            )

        when = at or _utcnow()
        self.status = new_status
        self.updated_at = when
        return StatusHistoryEntry(
            status=new_status.value,
            description=(note or "").strip() or DEFAULT_STATUS_DESCRIPTIONS[new_status],
            completed=new_status.is_terminal,
            recorded_at=when,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.subtotal
        return result

    @property
    def total(self) -> Money:
        return self.subtotal - self.discount + self.shipping_cost

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def display_number(self) -> str:
        return f"#{self.order_number}"
