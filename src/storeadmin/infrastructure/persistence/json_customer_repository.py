"""JSON-file-backed implementation of CustomerRepository."""

from __future__ import annotations

from pathlib import Path

from storeadmin.domain.model.customer import Customer
from storeadmin.domain.repository.customer_repository import CustomerRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile, parse_timestamp


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_by_id(self, customer_id: str) -> Customer | None:
        return self._first(lambda raw: raw["id"] == customer_id)

    def find_by_email(self, email: str) -> Customer | None:
        wanted = email.strip().lower()
        return self._first(lambda raw: (raw.get("email") or "").lower() == wanted)

    def find_by_phone(self, phone: str) -> Customer | None:
        wanted = phone.strip()
        return self._first(lambda raw: raw.get("phone") == wanted)

    def list_all(self) -> list[Customer]:
        customers = [self._to_domain(raw) for raw in self._file.load()]
        customers.sort(key=lambda c: c.created_at, reverse=True)
        return customers

    def save(self, customer: Customer) -> None:
        self._file.upsert(
            {
                "id": customer.id,
                "first_name": customer.first_name,
                "last_name": customer.last_name,
                "email": customer.email,
                "phone": customer.phone,
                "region": customer.region,
                "created_at": customer.created_at.isoformat(),
            }
        )

    def delete(self, customer_id: str) -> None:
        self._file.remove(lambda raw: raw["id"] == customer_id)

    # --- Helpers --------------------------------------------------------------

    def _first(self, predicate) -> Customer | None:
        for raw in self._file.load():
            if predicate(raw):
                return self._to_domain(raw)
        return None

    @staticmethod
    def _to_domain(raw: dict) -> Customer:
        return Customer(
            id=raw["id"],
            first_name=raw["first_name"],
            last_name=raw.get("last_name", ""),
            email=raw.get("email", ""),
            phone=raw.get("phone", ""),
            region=raw.get("region", ""),
            created_at=parse_timestamp(raw["created_at"]),
        )
