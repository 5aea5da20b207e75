"""Abstract repository for Customer aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeadmin.domain.model.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    def get_by_id(self, customer_id: str) -> Customer | None:
        """Return a customer by ID, or None."""

    @abstractmethod
    def find_by_email(self, email: str) -> Customer | None:
        """Return the customer with this email (case-insensitive), or None."""

    @abstractmethod
    def find_by_phone(self, phone: str) -> Customer | None:
        """Return the customer with this phone number, or None."""

    @abstractmethod
    def list_all(self) -> list[Customer]:
        """Return every customer, newest first."""

    @abstractmethod
    def save(self, customer: Customer) -> None:
        """Persist a new or updated customer."""

    @abstractmethod
    def delete(self, customer_id: str) -> None:
        """Remove a customer."""
