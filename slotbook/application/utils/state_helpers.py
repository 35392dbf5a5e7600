from __future__ import annotations

from dataclasses import replace

from slotbook.domain.entities.booking_draft import BookingDraft
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember
from slotbook.domain.entities.wizard_state import CatalogSnapshot, WizardState


def reset_for_new_business(draft: BookingDraft, business_id: str) -> BookingDraft:
    """Keep contact details; everything chosen for the previous business goes."""
    return replace(draft, business_id=business_id, service_id=None, staff_id=None, date=None, time=None)


def apply_service_choice(draft: BookingDraft, service: Service, staff: StaffMember | None) -> BookingDraft:
    """A different service changes the duration, so the picked time no longer holds."""
    if draft.service_id == service.id:
        return draft
    keep_staff = staff is not None and staff.offers(service)
    return replace(
        draft,
        service_id=service.id,
        staff_id=draft.staff_id if keep_staff else None,
        time=None,
    )


def apply_staff_choice(draft: BookingDraft, staff: StaffMember) -> BookingDraft:
    if draft.staff_id == staff.id:
        return draft
    return replace(draft, staff_id=staff.id, time=None)


def prune_to_catalog(draft: BookingDraft, catalog: CatalogSnapshot) -> BookingDraft:
    """Drop selections that the freshly loaded catalog no longer offers."""
    service = catalog.find_service(draft.service_id)
    staff = catalog.find_staff(draft.staff_id)
    if service is None:
        return replace(draft, service_id=None, staff_id=None, time=None)
    if draft.staff_id is not None and (staff is None or not staff.offers(service)):
        return replace(draft, staff_id=None, time=None)
    return draft


def staff_for_selected_service(state: WizardState) -> list[StaffMember]:
    """Staff members that can perform the selected service, in catalog order."""
    if state.catalog is None:
        return []
    service = state.selected_service
    if service is None:
        return list(state.catalog.staff)
    return [m for m in state.catalog.staff if m.offers(service)]


def fresh_state(state: WizardState) -> WizardState:
    """Empty wizard that still outranks every load issued by `state`."""
    return WizardState(
        businesses=state.businesses,
        generation=state.generation + 1,
        slot_generation=state.slot_generation + 1,
        submission_id=state.submission_id + 1,
    )
