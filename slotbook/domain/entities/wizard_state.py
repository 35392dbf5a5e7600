from __future__ import annotations

from dataclasses import dataclass

from slotbook.domain.entities.appointment import AppointmentView
from slotbook.domain.entities.booking_draft import BookingDraft, WizardStep
from slotbook.domain.entities.business import Business
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


@dataclass(frozen=True)
class CatalogSnapshot:
    business_id: str
    services: tuple[Service, ...] = ()
    staff: tuple[StaffMember, ...] = ()

    def find_service(self, service_id: str | None) -> Service | None:
        return next((s for s in self.services if s.id == service_id), None)

    def find_staff(self, staff_id: str | None) -> StaffMember | None:
        return next((m for m in self.staff if m.id == staff_id), None)


@dataclass(frozen=True)
class BookingFailure:
    kind: str  # "validation", "not_found", "slot_conflict", "transient"
    message: str
    fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class WizardState:
    step: WizardStep = WizardStep.SELECT_BUSINESS
    draft: BookingDraft = BookingDraft()
    businesses: tuple[Business, ...] = ()
    businesses_loading: bool = False
    catalog: CatalogSnapshot | None = None
    generation: int = 0  # bumped whenever the selected business changes
    catalog_loading: bool = False
    load_error: BookingFailure | None = None
    slot_generation: int = 0  # bumped whenever business/service/staff/date change
    slots: tuple[str, ...] = ()
    slots_loading: bool = False
    submission_id: int = 0
    submitting: bool = False
    error: BookingFailure | None = None
    appointment: AppointmentView | None = None

    @property
    def selected_service(self) -> Service | None:
        return self.catalog.find_service(self.draft.service_id) if self.catalog else None

    @property
    def selected_staff(self) -> StaffMember | None:
        return self.catalog.find_staff(self.draft.staff_id) if self.catalog else None

    @property
    def can_submit(self) -> bool:
        return (
            self.step == WizardStep.DETAILS
            and not self.submitting
            and not self.draft.missing_required_fields()
        )
