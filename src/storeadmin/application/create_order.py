"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
Line items snapshot the current price of the product or variant, and
stock is taken out of the matching counter before the order is stored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from storeadmin.application.create_customer import CreateCustomerHandler
from storeadmin.application.dto import CustomerSpec, OrderDetailDTO, OrderItemSpec
from storeadmin.application.order_views import to_detail_dto
from storeadmin.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from storeadmin.domain.model.identity import new_id
from storeadmin.domain.model.order import ContactDetails, Order, OrderLineItem, ShippingDetails
from storeadmin.domain.model.product import Product, Variant
from storeadmin.domain.model.value_objects import Money, Quantity
from storeadmin.domain.repository.customer_repository import CustomerRepository
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ResolvedItem:
    product: Product
    variant: Variant | None
    quantity: int

    @property
    def stock(self) -> int:
        return self.variant.stock if self.variant else self.product.stock

    @property
    def label(self) -> str:
        return self.variant.sku if self.variant else self.product.name


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        customer_repo: CustomerRepository,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        tz: tzinfo = timezone.utc,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._customer_repo = customer_repo
        self._clock = clock
        self._tz = tz

    def handle(
        self,
        customer: CustomerSpec,
        item_specs: list[OrderItemSpec],
        discount: str = "0",
        shipping_cost: str = "0",
        payment_method: str = "",
        shipping: ShippingDetails | None = None,
        customer_id: str | None = None,
    ) -> OrderDetailDTO:
        """Create a new order.

        Steps:
        1. Resolve each SKU to a product or variant (fail if not found).
        2. Check stock for every line before touching anything.
        3. Let the Order aggregate validate all business rules.
        4. Link the customer and take the stock out, then persist.
           Nothing is stored if any decrement fails.
        """
        resolved = [self._resolve(spec) for spec in item_specs]
        self._check_stock(resolved)

        line_items = [
            OrderLineItem(
                id=new_id(),
                product_id=item.product.id,
                product_name=item.product.name,
                sku=item.variant.sku if item.variant else item.product.sku,
                quantity=Quantity(item.quantity),
                unit_price=self._price_of(item),  # <-- price snapshot
                variant_id=item.variant.id if item.variant else None,
            )
            for item in resolved
        ]

        order = Order.create(
            id=new_id(),
            order_number=self._order_repo.next_order_number(),
            contact=ContactDetails(
                first_name=customer.first_name,
                last_name=customer.last_name,
                email=customer.email,
                phone=customer.phone,
            ),
            items=line_items,
            discount=Money.of(discount),
            shipping_cost=Money.of(shipping_cost),
            customer_id=self._link_customer(customer, customer_id),
            payment_method=payment_method,
            shipping=shipping or ShippingDetails(),
            ordered_at=self._clock(),
        )
        taken = self._take_stock(resolved)
        try:
            self._order_repo.save(order)
        except Exception:
            logger.error("Could not store order %s, returning its stock", order.display_number)
            self._return_stock(taken)
            raise

        logger.info("Order %s created, total %s", order.display_number, order.total)
        return to_detail_dto(
            order,
            product_lookup=self._product_repo.get_by_id,
            variant_lookup=self._product_repo.get_variant,
            tz=self._tz,
        )

    # --- Helpers ----------------------------------------------------------------

    def _resolve(self, spec: OrderItemSpec) -> _ResolvedItem:
        variant = self._product_repo.get_variant_by_sku(spec.sku)
        if variant is not None:
            product = self._product_repo.get_by_id(variant.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product for variant '{spec.sku}' not found")
            if not variant.active:
                raise ValidationError(f"Variant '{spec.sku}' is not available")
        else:
            product = self._product_repo.get_by_sku(spec.sku)
            if product is None:
                raise EntityNotFoundError(f"Product not found: '{spec.sku}'")
        if not product.is_active:
            raise ValidationError(f"Product '{product.name}' is not available")
        # Quantity validates positivity before anything else happens.
        return _ResolvedItem(product, variant, Quantity(spec.quantity).value)

    @staticmethod
    def _check_stock(items: list[_ResolvedItem]) -> None:
        needed: dict[str, int] = {}
        available: dict[str, _ResolvedItem] = {}
        for item in items:
            key = item.variant.id if item.variant else item.product.id
            needed[key] = needed.get(key, 0) + item.quantity
            available[key] = item
        for key, qty in needed.items():
            item = available[key]
            if qty > item.stock:
                raise ValidationError(
                    f"Insufficient stock for {item.label} "
                    f"(need {qty}, have {item.stock} available)"
                )

    def _adjust(self, item: _ResolvedItem, delta: int) -> None:
        if item.variant:
            self._product_repo.adjust_variant_stock(item.variant.id, delta)
        else:
            self._product_repo.adjust_stock(item.product.id, delta)

    def _take_stock(self, items: list[_ResolvedItem]) -> list[_ResolvedItem]:
        """Decrement every line; on failure put back what was already taken."""
        taken: list[_ResolvedItem] = []
        for item in items:
            try:
                self._adjust(item, -item.quantity)
            except Exception:
                logger.error("Stock decrement failed for %s, rolling back", item.label)
                self._return_stock(taken)
                raise
            taken.append(item)
        return taken

    def _return_stock(self, items: list[_ResolvedItem]) -> None:
        for item in reversed(items):
            try:
                self._adjust(item, item.quantity)
            except Exception:
                logger.exception(
                    "Could not return %d of %s to stock", item.quantity, item.label
                )

    @staticmethod
    def _price_of(item: _ResolvedItem) -> Money:
        if item.variant is not None and item.variant.price is not None:
            return item.variant.price
        return item.product.price

    def _link_customer(self, spec: CustomerSpec, customer_id: str | None) -> str | None:
        if customer_id:
            if self._customer_repo.get_by_id(customer_id) is None:
                raise EntityNotFoundError(f"Customer {customer_id} not found")
            return customer_id
        if not (spec.email.strip() or spec.phone.strip()):
            return None
        try:
            return CreateCustomerHandler(self._customer_repo).find_or_create(spec).id
        except DomainException as exc:
            logger.warning("Order will be created without a customer link: %s", exc)
            return None
