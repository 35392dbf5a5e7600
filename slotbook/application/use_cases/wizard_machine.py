"""
Booking wizard transitions.

`transition(state, event)` is pure: it returns the next WizardState plus the
effects (catalog loads, slot loads, the reservation call) the driver must run.
Every effect is tagged with the generation it was issued for; a result whose
tag is no longer current is dropped, so the last selected context always wins.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from slotbook.application.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from slotbook.application.utils.state_helpers import (
    apply_service_choice,
    apply_staff_choice,
    fresh_state,
    prune_to_catalog,
    reset_for_new_business,
)
from slotbook.domain.entities.booking_draft import DETAIL_FIELDS, BookingDraft, WizardStep
from slotbook.domain.entities.wizard_events import (
    Back,
    BusinessesLoaded,
    BusinessesLoadFailed,
    CatalogLoaded,
    CatalogLoadFailed,
    EditDetails,
    Leave,
    LoadBusinesses,
    LoadCatalog,
    LoadSlots,
    RetryCatalog,
    SelectBusiness,
    SelectService,
    SelectStaff,
    SlotsLoaded,
    SlotsLoadFailed,
    Start,
    SubmissionFailed,
    SubmissionSucceeded,
    Submit,
    SubmitReservation,
)
from slotbook.domain.entities.wizard_state import CatalogSnapshot, WizardState

Effect = LoadBusinesses | LoadCatalog | LoadSlots | SubmitReservation


@dataclass(frozen=True)
class Transition:
    state: WizardState
    effects: tuple[Effect, ...] = ()


def transition(state: WizardState, event: object) -> Transition:
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown wizard event: {type(event).__name__}")
    return handler(state, event)


def _require_step(state: WizardState, step: WizardStep, action: str) -> None:
    if state.step != step:
        raise InvalidTransitionError(f"Cannot {action} on step {state.step.name}")


def _slot_reload(state: WizardState) -> Transition:
    """Invalidate shown slots; request new ones when the draft pins a date."""
    slot_generation = state.slot_generation + 1
    draft = state.draft
    load = bool(
        state.step == WizardStep.DETAILS
        and draft.business_id
        and draft.service_id
        and (draft.date or "").strip()
    )
    next_state = replace(state, slot_generation=slot_generation, slots=(), slots_loading=load)
    if not load:
        return Transition(next_state)
    return Transition(
        next_state,
        (
            LoadSlots(
                slot_generation=slot_generation,
                business_id=draft.business_id or "",
                service_id=draft.service_id or "",
                staff_id=draft.staff_id,
                date=(draft.date or "").strip(),
            ),
        ),
    )


def _on_start(state: WizardState, event: Start) -> Transition:
    _require_step(state, WizardStep.SELECT_BUSINESS, "load businesses")
    return Transition(replace(state, businesses_loading=True, load_error=None), (LoadBusinesses(),))


def _on_businesses_loaded(state: WizardState, event: BusinessesLoaded) -> Transition:
    return Transition(replace(state, businesses=event.businesses, businesses_loading=False))


def _on_businesses_failed(state: WizardState, event: BusinessesLoadFailed) -> Transition:
    return Transition(replace(state, businesses_loading=False, load_error=event.failure))


def _on_select_business(state: WizardState, event: SelectBusiness) -> Transition:
    _require_step(state, WizardStep.SELECT_BUSINESS, "select a business")
    if state.businesses and all(b.id != event.business_id for b in state.businesses):
        raise NotFoundError(f"Business {event.business_id} not found")

    same = event.business_id == state.draft.business_id
    if same and state.catalog is not None and state.catalog.business_id == event.business_id and not state.catalog_loading:
        # catalog for this business is already on hand; re-advance with prior picks
        return Transition(replace(state, step=WizardStep.SELECT_SERVICE, load_error=None))

    draft = state.draft if same else reset_for_new_business(state.draft, event.business_id)
    return _issue_catalog_load(replace(state, draft=draft, catalog=None, slots=(), slots_loading=False))


def _issue_catalog_load(state: WizardState) -> Transition:
    generation = state.generation + 1
    next_state = replace(
        state,
        generation=generation,
        slot_generation=state.slot_generation + 1,
        catalog_loading=True,
        load_error=None,
    )
    return Transition(next_state, (LoadCatalog(generation=generation, business_id=state.draft.business_id or ""),))


def _on_retry_catalog(state: WizardState, event: RetryCatalog) -> Transition:
    _require_step(state, WizardStep.SELECT_BUSINESS, "reload the catalog")
    if not state.draft.business_id:
        raise InvalidTransitionError("No business selected")
    return _issue_catalog_load(state)


def _on_catalog_loaded(state: WizardState, event: CatalogLoaded) -> Transition:
    if event.generation != state.generation or not state.catalog_loading:
        return Transition(state)
    catalog = CatalogSnapshot(business_id=event.business_id, services=event.services, staff=event.staff)
    return Transition(
        replace(
            state,
            step=WizardStep.SELECT_SERVICE,
            catalog=catalog,
            catalog_loading=False,
            load_error=None,
            draft=prune_to_catalog(state.draft, catalog),
        )
    )


def _on_catalog_failed(state: WizardState, event: CatalogLoadFailed) -> Transition:
    if event.generation != state.generation or not state.catalog_loading:
        return Transition(state)
    return Transition(replace(state, catalog_loading=False, load_error=event.failure))


def _on_select_service(state: WizardState, event: SelectService) -> Transition:
    _require_step(state, WizardStep.SELECT_SERVICE, "select a service")
    service = state.catalog.find_service(event.service_id) if state.catalog else None
    if service is None:
        raise NotFoundError(f"Service {event.service_id} not found")
    draft = apply_service_choice(state.draft, service, state.selected_staff)
    return Transition(replace(state, step=WizardStep.SELECT_STAFF, draft=draft))


def _on_select_staff(state: WizardState, event: SelectStaff) -> Transition:
    _require_step(state, WizardStep.SELECT_STAFF, "select a staff member")
    staff = state.catalog.find_staff(event.staff_id) if state.catalog else None
    if staff is None:
        raise NotFoundError(f"Staff member {event.staff_id} not found")
    service = state.selected_service
    if service is not None and not staff.offers(service):
        raise ValidationError(f"{staff.name} does not offer {service.name}", ["staff_id"])
    draft = apply_staff_choice(state.draft, staff)
    return _slot_reload(replace(state, step=WizardStep.DETAILS, draft=draft))


def _on_edit_details(state: WizardState, event: EditDetails) -> Transition:
    _require_step(state, WizardStep.DETAILS, "edit booking details")
    if state.submitting:
        raise InvalidTransitionError("Cannot edit details while the booking is being submitted")

    changes = dict(event.changes)
    unknown = [name for name in changes if name not in DETAIL_FIELDS]
    if unknown:
        raise ValueError(f"Unknown booking fields: {', '.join(unknown)}")

    next_state = replace(state, draft=state.draft.with_changes(**changes))
    if "date" in changes and changes["date"] != state.draft.date:
        return _slot_reload(next_state)
    return Transition(next_state)


def _on_slots_loaded(state: WizardState, event: SlotsLoaded) -> Transition:
    if event.slot_generation != state.slot_generation or not state.slots_loading:
        return Transition(state)
    return Transition(replace(state, slots=event.slots, slots_loading=False))


def _on_slots_failed(state: WizardState, event: SlotsLoadFailed) -> Transition:
    if event.slot_generation != state.slot_generation or not state.slots_loading:
        return Transition(state)
    return Transition(replace(state, slots=(), slots_loading=False, load_error=event.failure))


def _on_submit(state: WizardState, event: Submit) -> Transition:
    _require_step(state, WizardStep.DETAILS, "submit")
    if state.submitting or state.draft.missing_required_fields():
        return Transition(state)
    submission_id = state.submission_id + 1
    return Transition(
        replace(state, submitting=True, submission_id=submission_id, error=None),
        (SubmitReservation(submission_id=submission_id, request=state.draft.to_request()),),
    )


def _on_submission_succeeded(state: WizardState, event: SubmissionSucceeded) -> Transition:
    if event.submission_id != state.submission_id or not state.submitting:
        return Transition(state)
    return Transition(
        replace(
            state,
            step=WizardStep.CONFIRMED,
            draft=BookingDraft(),
            submitting=False,
            error=None,
            appointment=event.appointment,
            slots=(),
            slots_loading=False,
        )
    )


def _on_submission_failed(state: WizardState, event: SubmissionFailed) -> Transition:
    if event.submission_id != state.submission_id or not state.submitting:
        return Transition(state)
    return Transition(replace(state, submitting=False, error=event.failure))


def _on_back(state: WizardState, event: Back) -> Transition:
    if state.step == WizardStep.SELECT_BUSINESS:
        raise InvalidTransitionError("Already on the first step; leave the flow instead")
    if state.step == WizardStep.CONFIRMED:
        raise InvalidTransitionError("A confirmed booking can only be left")
    if state.submitting:
        raise InvalidTransitionError("Cannot go back while the booking is being submitted")

    previous = WizardStep(state.step - 1)
    next_state = replace(state, step=previous, error=None)
    if state.step == WizardStep.DETAILS:
        # slot results still in flight belong to the step being left
        next_state = replace(next_state, slot_generation=state.slot_generation + 1, slots=(), slots_loading=False)
    return Transition(next_state)


def _on_leave(state: WizardState, event: Leave) -> Transition:
    return Transition(fresh_state(state))


_HANDLERS = {
    Start: _on_start,
    BusinessesLoaded: _on_businesses_loaded,
    BusinessesLoadFailed: _on_businesses_failed,
    SelectBusiness: _on_select_business,
    RetryCatalog: _on_retry_catalog,
    CatalogLoaded: _on_catalog_loaded,
    CatalogLoadFailed: _on_catalog_failed,
    SelectService: _on_select_service,
    SelectStaff: _on_select_staff,
    EditDetails: _on_edit_details,
    SlotsLoaded: _on_slots_loaded,
    SlotsLoadFailed: _on_slots_failed,
    Submit: _on_submit,
    SubmissionSucceeded: _on_submission_succeeded,
    SubmissionFailed: _on_submission_failed,
    Back: _on_back,
    Leave: _on_leave,
}
