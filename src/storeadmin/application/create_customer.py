"""Application service: Create Customer use cases."""

from __future__ import annotations

import logging

from storeadmin.application.dto import CustomerSpec
from storeadmin.domain.model.customer import Customer
from storeadmin.domain.model.identity import new_id
from storeadmin.domain.repository.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)


class CreateCustomerHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self, spec: CustomerSpec) -> Customer:
        """Create a new customer.  An empty first name is rejected."""
        customer = Customer.create(
            id=new_id(),
            first_name=spec.first_name,
            last_name=spec.last_name,
            email=spec.email,
            phone=spec.phone,
            region=spec.region,
        )
        self._customer_repo.save(customer)
        logger.info("Customer %s created (%s)", customer.id, customer.full_name)
        return customer

    def find_or_create(self, spec: CustomerSpec) -> Customer:
        """Return the customer matching *spec* by email, then phone, or create one."""
        existing = None
        if spec.email.strip():
            existing = self._customer_repo.find_by_email(spec.email.strip())
        if existing is None and spec.phone.strip():
            existing = self._customer_repo.find_by_phone(spec.phone.strip())
        if existing is not None:
            logger.debug("Matched existing customer %s", existing.id)
            return existing
        return self.handle(spec)


class ListCustomersHandler:

    def __init__(self, customer_repo: CustomerRepository) -> None:
        self._customer_repo = customer_repo

    def handle(self, search: str | None = None) -> list[Customer]:
        customers = self._customer_repo.list_all()
        if search and search.strip():
            needle = search.strip().lower()
            customers = [
                c
                for c in customers
                if needle in c.full_name.lower()
                or needle in c.email.lower()
                or needle in c.phone
            ]
        return customers
