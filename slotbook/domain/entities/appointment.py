from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from enum import Enum

from slotbook.domain.entities.customer import Customer
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class AppointmentStatus(str, Enum):
    scheduled = "scheduled"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


@dataclass(frozen=True)
class Appointment:
    id: str
    business_id: str
    customer_id: str
    date: date
    start_time: time
    end_time: time
    staff_id: str | None = None
    service_id: str | None = None
    status: AppointmentStatus = AppointmentStatus.scheduled
    notes: str | None = None
    created_at: float | None = None
    updated_at: float | None = None

    @property
    def blocks_slot(self) -> bool:
        return self.status != AppointmentStatus.cancelled

    def overlaps(self, start: time, end: time) -> bool:
        # half-open intervals: back-to-back bookings do not collide
        return start < self.end_time and self.start_time < end


@dataclass(frozen=True)
class AppointmentView:
    """Appointment with customer, staff and service expanded."""

    appointment: Appointment
    customer: Customer
    staff: StaffMember | None = None
    service: Service | None = None

    @property
    def id(self) -> str:
        return self.appointment.id
