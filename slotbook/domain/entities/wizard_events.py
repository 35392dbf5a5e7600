from __future__ import annotations

from dataclasses import dataclass

from slotbook.domain.entities.appointment import AppointmentView
from slotbook.domain.entities.business import Business
from slotbook.domain.entities.reservation import ReservationRequest
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember
from slotbook.domain.entities.wizard_state import BookingFailure


# User events


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class SelectBusiness:
    business_id: str


@dataclass(frozen=True)
class RetryCatalog:
    pass


@dataclass(frozen=True)
class SelectService:
    service_id: str


@dataclass(frozen=True)
class SelectStaff:
    staff_id: str


@dataclass(frozen=True)
class EditDetails:
    changes: tuple[tuple[str, str | None], ...]


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Leave:
    pass


# Results fed back by the driver


@dataclass(frozen=True)
class BusinessesLoaded:
    businesses: tuple[Business, ...]


@dataclass(frozen=True)
class BusinessesLoadFailed:
    failure: BookingFailure


@dataclass(frozen=True)
class CatalogLoaded:
    generation: int
    business_id: str
    services: tuple[Service, ...]
    staff: tuple[StaffMember, ...]


@dataclass(frozen=True)
class CatalogLoadFailed:
    generation: int
    business_id: str
    failure: BookingFailure


@dataclass(frozen=True)
class SlotsLoaded:
    slot_generation: int
    slots: tuple[str, ...]


@dataclass(frozen=True)
class SlotsLoadFailed:
    slot_generation: int
    failure: BookingFailure


@dataclass(frozen=True)
class SubmissionSucceeded:
    submission_id: int
    appointment: AppointmentView


@dataclass(frozen=True)
class SubmissionFailed:
    submission_id: int
    failure: BookingFailure


# Effects requested by a transition


@dataclass(frozen=True)
class LoadBusinesses:
    pass


@dataclass(frozen=True)
class LoadCatalog:
    generation: int
    business_id: str


@dataclass(frozen=True)
class LoadSlots:
    slot_generation: int
    business_id: str
    service_id: str
    staff_id: str | None
    date: str


@dataclass(frozen=True)
class SubmitReservation:
    submission_id: int
    request: ReservationRequest
