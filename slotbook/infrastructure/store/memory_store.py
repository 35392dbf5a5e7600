from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Any, Iterator

from slotbook.application.ports.booking_store import BookingStorePort
from slotbook.domain.entities.appointment import Appointment
from slotbook.domain.entities.business import Business
from slotbook.domain.entities.customer import Customer, normalize_email
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class MemoryBookingStore(BookingStorePort):
    def __init__(self) -> None:
        self._businesses: dict[str, Business] = {}
        self._services: dict[str, Service] = {}
        self._staff: dict[str, StaffMember] = {}
        self._customers: dict[str, Customer] = {}
        self._customer_by_email: dict[tuple[str, str], str] = {}
        self._appointments: dict[str, Appointment] = {}
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            outermost = self._depth == 0
            snapshot = self._snapshot() if outermost else None
            self._depth += 1
            try:
                yield
            except BaseException:
                self._depth -= 1
                if outermost:
                    self._restore(snapshot or {})
                raise
            self._depth -= 1
            if outermost:
                try:
                    self._commit()
                except BaseException:
                    # memory must not hold what never reached the backing file
                    self._restore(snapshot or {})
                    raise

    def list_businesses(self) -> list[Business]:
        with self._lock:
            return list(self._businesses.values())

    def get_business(self, business_id: str) -> Business | None:
        with self._lock:
            return self._businesses.get(business_id)

    def add_business(self, business: Business) -> None:
        with self.atomic():
            self._businesses[business.id] = business

    def list_services(self, business_id: str) -> list[Service]:
        with self._lock:
            return [s for s in self._services.values() if s.business_id == business_id]

    def get_service(self, service_id: str) -> Service | None:
        with self._lock:
            return self._services.get(service_id)

    def add_service(self, service: Service) -> None:
        with self.atomic():
            self._services[service.id] = service

    def list_staff(self, business_id: str) -> list[StaffMember]:
        with self._lock:
            return [m for m in self._staff.values() if m.business_id == business_id]

    def get_staff(self, staff_id: str) -> StaffMember | None:
        with self._lock:
            return self._staff.get(staff_id)

    def add_staff(self, staff: StaffMember) -> None:
        with self.atomic():
            self._staff[staff.id] = staff

    def find_customer_by_email(self, business_id: str, email: str) -> Customer | None:
        with self._lock:
            customer_id = self._customer_by_email.get((business_id, email))
            return self._customers.get(customer_id) if customer_id else None

    def get_customer(self, customer_id: str) -> Customer | None:
        with self._lock:
            return self._customers.get(customer_id)

    def list_customers(self, business_id: str) -> list[Customer]:
        with self._lock:
            return [c for c in self._customers.values() if c.business_id == business_id]

    def add_customer(self, customer: Customer) -> None:
        with self.atomic():
            email = normalize_email(customer.email)
            if email is not None:
                key = (customer.business_id, email)
                existing = self._customer_by_email.get(key)
                if existing is not None and existing != customer.id:
                    raise ValueError(f"Customer with email {email} already exists for business {customer.business_id}")
                self._customer_by_email[key] = customer.id
            self._customers[customer.id] = customer

    def get_appointment(self, appointment_id: str) -> Appointment | None:
        with self._lock:
            return self._appointments.get(appointment_id)

    def list_appointments(
        self,
        business_id: str,
        day: date | None = None,
        staff_id: str | None = None,
    ) -> list[Appointment]:
        with self._lock:
            return [
                a
                for a in self._appointments.values()
                if a.business_id == business_id
                and (day is None or a.date == day)
                and (staff_id is None or a.staff_id == staff_id)
            ]

    def save_appointment(self, appointment: Appointment) -> None:
        with self.atomic():
            self._appointments[appointment.id] = appointment

    def _snapshot(self) -> dict[str, Any]:
        return {
            "businesses": dict(self._businesses),
            "services": dict(self._services),
            "staff": dict(self._staff),
            "customers": dict(self._customers),
            "customer_by_email": dict(self._customer_by_email),
            "appointments": dict(self._appointments),
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        self._businesses = snapshot.get("businesses", {})
        self._services = snapshot.get("services", {})
        self._staff = snapshot.get("staff", {})
        self._customers = snapshot.get("customers", {})
        self._customer_by_email = snapshot.get("customer_by_email", {})
        self._appointments = snapshot.get("appointments", {})

    def _commit(self) -> None:
        """Called when the outermost transaction completes. Nothing to flush in memory."""
        return None
