from __future__ import annotations

import logging
import re
import time as clock
import uuid
from dataclasses import replace
from datetime import date, time
from typing import Callable

from slotbook.application.exceptions import NotFoundError, SlotConflictError, ValidationError
from slotbook.application.ports.booking_store import BookingStorePort
from slotbook.application.utils.time_parser import add_minutes, format_24h, parse_iso_date, parse_time_label
from slotbook.domain.entities.appointment import Appointment, AppointmentStatus, AppointmentView
from slotbook.domain.entities.business_hours import BusinessHours
from slotbook.domain.entities.customer import Customer, normalize_email
from slotbook.domain.entities.reservation import ReservationRequest
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_REQUIRED = ("business_id", "service_id", "date", "time", "customer_name", "customer_email")


class ReservationUseCase:
    def __init__(
        self,
        store: BookingStorePort,
        hours_for: Callable[[str], BusinessHours] | None = None,
    ) -> None:
        """`hours_for` maps a business id to its opening hours; without it any time of day is bookable."""
        self._store = store
        self._hours_for = hours_for
        self._logger = logging.getLogger(__name__)

    def submit(self, request: ReservationRequest) -> AppointmentView:
        missing = [name for name in _REQUIRED if not (getattr(request, name) or "").strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing)

        email = normalize_email(request.customer_email)
        if not email or not _EMAIL_PATTERN.match(email):
            raise ValidationError("Customer email is not a valid address", ["customer_email"])

        day = parse_iso_date(request.date)
        if day is None:
            raise ValidationError(f"Invalid date: {request.date}", ["date"])

        start = parse_time_label(request.time)
        if start is None:
            raise ValidationError(f"Invalid time: {request.time}", ["time"])

        with self._store.atomic():
            business = self._store.get_business(request.business_id)
            if business is None:
                raise NotFoundError(f"Business {request.business_id} not found")

            service = self._active_service(request.business_id, request.service_id)
            staff = self._active_staff(request.business_id, request.staff_id) if request.staff_id else None
            if staff is not None and not staff.offers(service):
                raise ValidationError(f"{staff.name} does not offer {service.name}", ["staff_id"])

            end = add_minutes(start, service.duration_minutes)
            if end is None:
                raise ValidationError(
                    f"{service.name} starting at {format_24h(start)} would end after midnight",
                    ["time"],
                )

            if self._hours_for is not None and not self._hours_for(business.id).contains(day, start, end):
                raise ValidationError(
                    f"{service.name} at {format_24h(start)} on {day.isoformat()} is outside business hours",
                    ["time"],
                )

            if staff is not None:
                self._ensure_free(request.business_id, staff.id, day, start, end)

            customer = self._resolve_customer(request, email)

            now = clock.time()
            appointment = Appointment(
                id=uuid.uuid4().hex,
                business_id=business.id,
                customer_id=customer.id,
                staff_id=staff.id if staff else None,
                service_id=service.id,
                date=day,
                start_time=start,
                end_time=end,
                status=AppointmentStatus.scheduled,
                notes=(request.notes or "").strip() or None,
                created_at=now,
                updated_at=now,
            )
            self._store.save_appointment(appointment)

        self._logger.info(
            "Appointment created",
            extra={
                "appointment_id": appointment.id,
                "business_id": business.id,
                "staff_id": appointment.staff_id,
                "date": day.isoformat(),
                "start": format_24h(start),
            },
        )
        return AppointmentView(appointment=appointment, customer=customer, staff=staff, service=service)

    def get_appointment(self, appointment_id: str) -> AppointmentView:
        with self._store.atomic():
            appointment = self._store.get_appointment(appointment_id)
            if appointment is None:
                raise NotFoundError(f"Appointment {appointment_id} not found")
            return self._view(appointment)

    def list_appointments(self, business_id: str, day: date | None = None) -> list[AppointmentView]:
        with self._store.atomic():
            if self._store.get_business(business_id) is None:
                raise NotFoundError(f"Business {business_id} not found")
            appointments = sorted(
                self._store.list_appointments(business_id, day=day),
                key=lambda a: (a.date, a.start_time, a.id),
            )
            return [self._view(a) for a in appointments]

    def list_customers(self, business_id: str) -> list[Customer]:
        if self._store.get_business(business_id) is None:
            raise NotFoundError(f"Business {business_id} not found")
        return sorted(self._store.list_customers(business_id), key=lambda c: (c.name.lower(), c.id))

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> AppointmentView:
        with self._store.atomic():
            appointment = self._store.get_appointment(appointment_id)
            if appointment is None:
                raise NotFoundError(f"Appointment {appointment_id} not found")

            if appointment.status == status:
                return self._view(appointment)

            # re-activating would skip the overlap check
            if appointment.status == AppointmentStatus.cancelled:
                raise ValidationError("A cancelled appointment cannot be re-activated", ["status"])

            updated = replace(appointment, status=status, updated_at=clock.time())
            self._store.save_appointment(updated)

        self._logger.info(
            "Appointment status updated",
            extra={"appointment_id": appointment_id, "status": status.value},
        )
        return self._view(updated)

    def _active_service(self, business_id: str, service_id: str) -> Service:
        service = self._store.get_service(service_id)
        if service is None or service.business_id != business_id or not service.is_active:
            raise NotFoundError(f"Service {service_id} not found")
        return service

    def _active_staff(self, business_id: str, staff_id: str) -> StaffMember:
        staff = self._store.get_staff(staff_id)
        if staff is None or staff.business_id != business_id or not staff.is_active:
            raise NotFoundError(f"Staff member {staff_id} not found")
        return staff

    def _ensure_free(self, business_id: str, staff_id: str, day: date, start: time, end: time) -> None:
        for existing in self._store.list_appointments(business_id, day=day, staff_id=staff_id):
            if existing.blocks_slot and existing.overlaps(start, end):
                self._logger.info(
                    "Slot conflict",
                    extra={
                        "business_id": business_id,
                        "staff_id": staff_id,
                        "date": day.isoformat(),
                        "conflicting_id": existing.id,
                    },
                )
                raise SlotConflictError(
                    f"Staff member is already booked from {format_24h(existing.start_time)} "
                    f"to {format_24h(existing.end_time)} on {day.isoformat()}"
                )

    def _resolve_customer(self, request: ReservationRequest, email: str) -> Customer:
        existing = self._store.find_customer_by_email(request.business_id, email)
        if existing is not None:
            return existing

        customer = Customer(
            id=uuid.uuid4().hex,
            business_id=request.business_id,
            name=request.customer_name.strip(),
            email=email,
            phone=(request.customer_phone or "").strip() or None,
        )
        self._store.add_customer(customer)
        return customer

    def _view(self, appointment: Appointment) -> AppointmentView:
        customer = self._store.get_customer(appointment.customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {appointment.customer_id} not found")
        return AppointmentView(
            appointment=appointment,
            customer=customer,
            staff=self._store.get_staff(appointment.staff_id) if appointment.staff_id else None,
            service=self._store.get_service(appointment.service_id) if appointment.service_id else None,
        )
