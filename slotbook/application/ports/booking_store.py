from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date

from slotbook.domain.entities.appointment import Appointment
from slotbook.domain.entities.business import Business
from slotbook.domain.entities.customer import Customer
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class BookingStorePort(ABC):
    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """
        Transaction scope. Reads and writes inside one scope are isolated from
        other scopes; writes are rolled back if the scope exits with an error.
        Scopes may be nested.
        """
        raise NotImplementedError

    @abstractmethod
    def list_businesses(self) -> list[Business]:
        raise NotImplementedError

    @abstractmethod
    def get_business(self, business_id: str) -> Business | None:
        raise NotImplementedError

    @abstractmethod
    def add_business(self, business: Business) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_services(self, business_id: str) -> list[Service]:
        """All services of a business, including inactive ones, unordered."""
        raise NotImplementedError

    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        raise NotImplementedError

    @abstractmethod
    def add_service(self, service: Service) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_staff(self, business_id: str) -> list[StaffMember]:
        """All staff of a business, including inactive ones, unordered."""
        raise NotImplementedError

    @abstractmethod
    def get_staff(self, staff_id: str) -> StaffMember | None:
        raise NotImplementedError

    @abstractmethod
    def add_staff(self, staff: StaffMember) -> None:
        raise NotImplementedError

    @abstractmethod
    def find_customer_by_email(self, business_id: str, email: str) -> Customer | None:
        """Email is expected to be normalized already."""
        raise NotImplementedError

    @abstractmethod
    def get_customer(self, customer_id: str) -> Customer | None:
        raise NotImplementedError

    @abstractmethod
    def list_customers(self, business_id: str) -> list[Customer]:
        raise NotImplementedError

    @abstractmethod
    def add_customer(self, customer: Customer) -> None:
        """Raises ValueError if (business_id, email) is already taken."""
        raise NotImplementedError

    @abstractmethod
    def get_appointment(self, appointment_id: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def list_appointments(
        self,
        business_id: str,
        day: date | None = None,
        staff_id: str | None = None,
    ) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def save_appointment(self, appointment: Appointment) -> None:
        """Insert or replace by id."""
        raise NotImplementedError
