"""
Tests for the pure wizard transition function.
"""

from __future__ import annotations

from datetime import date, time

import pytest

from slotbook.application.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from slotbook.application.use_cases.wizard_machine import transition
from slotbook.domain.entities.appointment import Appointment, AppointmentView
from slotbook.domain.entities.booking_draft import BookingDraft, WizardStep
from slotbook.domain.entities.business import Business, BusinessCategory
from slotbook.domain.entities.customer import Customer
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember
from slotbook.domain.entities.wizard_events import (
    Back,
    BusinessesLoaded,
    CatalogLoaded,
    CatalogLoadFailed,
    EditDetails,
    Leave,
    LoadCatalog,
    LoadSlots,
    RetryCatalog,
    SelectBusiness,
    SelectService,
    SelectStaff,
    SlotsLoaded,
    SubmissionFailed,
    SubmissionSucceeded,
    Submit,
    SubmitReservation,
)
from slotbook.domain.entities.wizard_state import BookingFailure, WizardState

BUSINESSES = (
    Business(id="b1", name="Bright Smile Dental", category=BusinessCategory.clinic),
    Business(id="b2", name="Luxe Hair Studio", category=BusinessCategory.salon),
)
CLEANING = Service(id="s1", business_id="b1", name="Cleaning", duration_minutes=60, price=120.0, category="preventive")
WHITENING = Service(id="s4", business_id="b1", name="Teeth Whitening", duration_minutes=90, price=350.0, category="cosmetic")
FILLING = Service(id="s3", business_id="b1", name="Filling", duration_minutes=45, price=150.0, category="restorative")
JOHNSON = StaffMember(id="st1", business_id="b1", name="Dr. Johnson", specialties=("preventive", "cosmetic"))
SMITH = StaffMember(id="st2", business_id="b1", name="Dr. Smith", specialties=("restorative", "preventive"))
HAIRCUT = Service(id="b2-svc-2", business_id="b2", name="Haircut", duration_minutes=45, price=55.0, category="hair")
MARIA = StaffMember(id="b2-staff-1", business_id="b2", name="Maria Lopez", specialties=("hair",))


def _apply(state: WizardState, *events):
    effects = ()
    for event in events:
        result = transition(state, event)
        state, effects = result.state, result.effects
    return state, effects


def _catalog_loaded(state: WizardState, business_id: str = "b1") -> CatalogLoaded:
    if business_id == "b1":
        return CatalogLoaded(state.generation, "b1", (CLEANING, FILLING, WHITENING), (JOHNSON, SMITH))
    return CatalogLoaded(state.generation, business_id, (HAIRCUT,), (MARIA,))


def _at_details() -> WizardState:
    state, _ = _apply(WizardState(), BusinessesLoaded(BUSINESSES), SelectBusiness("b1"))
    state, _ = _apply(state, _catalog_loaded(state), SelectService("s1"), SelectStaff("st1"))
    return state


def _filled() -> WizardState:
    state, _ = _apply(
        _at_details(),
        EditDetails(
            (
                ("date", "2025-06-10"),
                ("time", "09:00"),
                ("customer_name", "Emma"),
                ("customer_email", "emma@example.com"),
            )
        ),
    )
    return state


def _appointment_view() -> AppointmentView:
    return AppointmentView(
        appointment=Appointment(
            id="a1",
            business_id="b1",
            customer_id="c1",
            staff_id="st1",
            service_id="s1",
            date=date(2025, 6, 10),
            start_time=time(9, 0),
            end_time=time(10, 0),
        ),
        customer=Customer(id="c1", business_id="b1", name="Emma", email="emma@example.com"),
        staff=JOHNSON,
        service=CLEANING,
    )


def test_business_selection_waits_for_catalog():
    state, effects = _apply(WizardState(), BusinessesLoaded(BUSINESSES), SelectBusiness("b1"))

    assert state.step == WizardStep.SELECT_BUSINESS
    assert state.catalog_loading
    assert state.draft.business_id == "b1"
    assert effects == (LoadCatalog(generation=state.generation, business_id="b1"),)

    state, _ = _apply(state, _catalog_loaded(state))
    assert state.step == WizardStep.SELECT_SERVICE
    assert not state.catalog_loading
    assert [s.id for s in state.catalog.services] == ["s1", "s3", "s4"]


def test_stale_catalog_is_ignored_whatever_the_arrival_order():
    state, _ = _apply(WizardState(), BusinessesLoaded(BUSINESSES), SelectBusiness("b1"))
    b1_loaded = _catalog_loaded(state, "b1")
    state, _ = _apply(state, SelectBusiness("b2"))
    b2_loaded = _catalog_loaded(state, "b2")

    late_b1, _ = _apply(state, b2_loaded, b1_loaded)
    early_b1, _ = _apply(state, b1_loaded, b2_loaded)

    for final in (late_b1, early_b1):
        assert final.step == WizardStep.SELECT_SERVICE
        assert final.draft.business_id == "b2"
        assert final.catalog.business_id == "b2"
        assert [s.id for s in final.catalog.services] == ["b2-svc-2"]


def test_catalog_failure_keeps_step_and_allows_retry():
    state, _ = _apply(WizardState(), SelectBusiness("b1"))
    failure = BookingFailure(kind="transient", message="down")
    state, _ = _apply(state, CatalogLoadFailed(state.generation, "b1", failure))

    assert state.step == WizardStep.SELECT_BUSINESS
    assert state.load_error == failure
    assert state.draft.business_id == "b1"

    state, effects = _apply(state, RetryCatalog())
    assert state.catalog_loading and state.load_error is None
    assert effects == (LoadCatalog(generation=state.generation, business_id="b1"),)


def test_unknown_business_is_rejected():
    state, _ = _apply(WizardState(), BusinessesLoaded(BUSINESSES))
    with pytest.raises(NotFoundError):
        transition(state, SelectBusiness("b9"))


def test_forward_moves_never_clear_earlier_fields():
    state = _filled()
    draft = state.draft

    assert state.step == WizardStep.DETAILS
    assert (draft.business_id, draft.service_id, draft.staff_id) == ("b1", "s1", "st1")
    assert draft.date == "2025-06-10" and draft.customer_email == "emma@example.com"


def test_events_out_of_order_are_invalid():
    with pytest.raises(InvalidTransitionError):
        transition(WizardState(), SelectService("s1"))
    with pytest.raises(InvalidTransitionError):
        transition(WizardState(), Submit())
    with pytest.raises(InvalidTransitionError):
        transition(_at_details(), SelectStaff("st2"))


def test_staff_must_offer_the_selected_service():
    state, _ = _apply(WizardState(), SelectBusiness("b1"))
    state, _ = _apply(state, _catalog_loaded(state), SelectService("s4"))

    with pytest.raises(ValidationError):
        transition(state, SelectStaff("st2"))


def test_selecting_staff_with_a_date_requests_slots():
    state = _filled()
    state, _ = _apply(state, Back(), Back(), SelectService("s1"))
    state, effects = _apply(state, SelectStaff("st1"))

    assert state.slots_loading
    assert effects == (
        LoadSlots(
            slot_generation=state.slot_generation,
            business_id="b1",
            service_id="s1",
            staff_id="st1",
            date="2025-06-10",
        ),
    )


def test_date_change_reloads_slots_and_drops_stale_ones():
    state = _at_details()
    state, effects = _apply(state, EditDetails((("date", "2025-06-10"),)))
    first_generation = effects[0].slot_generation

    state, _ = _apply(state, EditDetails((("date", "2025-06-11"),)))
    state, _ = _apply(state, SlotsLoaded(first_generation, ("09:00",)))
    assert state.slots == () and state.slots_loading

    state, _ = _apply(state, SlotsLoaded(state.slot_generation, ("10:00", "10:30")))
    assert state.slots == ("10:00", "10:30")
    assert not state.slots_loading


def test_unknown_detail_field_is_rejected():
    with pytest.raises(ValueError):
        transition(_at_details(), EditDetails((("staff_id", "st2"),)))


def test_submit_with_missing_fields_changes_nothing():
    state, _ = _apply(_at_details(), EditDetails((("customer_name", "Emma"),)))

    assert not state.can_submit
    result = transition(state, Submit())

    assert result.state == state
    assert result.effects == ()


def test_submit_issues_one_reservation_at_a_time():
    assert _filled().can_submit
    state, effects = _apply(_filled(), Submit())

    assert state.submitting
    assert len(effects) == 1 and isinstance(effects[0], SubmitReservation)
    request = effects[0].request
    assert (request.business_id, request.service_id, request.staff_id) == ("b1", "s1", "st1")
    assert (request.date, request.time, request.customer_email) == ("2025-06-10", "09:00", "emma@example.com")

    again = transition(state, Submit())
    assert again.state == state and again.effects == ()


def test_failed_submission_keeps_the_draft_for_retry():
    state = _filled()
    draft = state.draft
    state, effects = _apply(state, Submit())
    failure = BookingFailure(kind="slot_conflict", message="taken")

    state, _ = _apply(state, SubmissionFailed(effects[0].submission_id, failure))

    assert state.step == WizardStep.DETAILS
    assert state.draft == draft
    assert state.error == failure
    assert not state.submitting

    state, effects = _apply(state, Submit())
    assert state.error is None and len(effects) == 1


def test_successful_submission_confirms_and_discards_draft():
    state, effects = _apply(_filled(), Submit())
    view = _appointment_view()

    state, _ = _apply(state, SubmissionSucceeded(effects[0].submission_id, view))

    assert state.step == WizardStep.CONFIRMED
    assert state.appointment == view
    assert state.draft.missing_required_fields() == [
        "business_id", "service_id", "date", "time", "customer_name", "customer_email",
    ]
    with pytest.raises(InvalidTransitionError):
        transition(state, Back())


def test_late_submission_result_after_leaving_is_ignored():
    state, effects = _apply(_filled(), Submit())
    state, _ = _apply(state, Leave())

    after, _ = _apply(state, SubmissionSucceeded(effects[0].submission_id, _appointment_view()))
    assert after == state
    assert after.step == WizardStep.SELECT_BUSINESS


def test_back_keeps_fields_and_readvancing_restores_them():
    state = _filled()
    draft = state.draft

    state, _ = _apply(state, Back(), Back(), Back())
    assert state.step == WizardStep.SELECT_BUSINESS
    assert state.draft == draft

    state, _ = _apply(state, SelectBusiness("b1"), SelectService("s1"), SelectStaff("st1"))
    assert state.step == WizardStep.DETAILS
    assert state.draft == draft


def test_changing_service_drops_staff_that_no_longer_fits():
    state, _ = _apply(_filled(), Back(), Back())
    assert state.step == WizardStep.SELECT_SERVICE

    kept, _ = _apply(state, SelectService("s4"))  # Dr. Johnson does cosmetic
    assert kept.draft.staff_id == "st1"
    assert kept.draft.time is None
    assert kept.draft.customer_email == "emma@example.com"

    dropped, _ = _apply(state, SelectService("s3"))  # restorative only Dr. Smith
    assert dropped.draft.staff_id is None
    assert dropped.draft.date == "2025-06-10"


def test_new_business_clears_dependent_choices_but_not_contact():
    state, _ = _apply(_filled(), Back(), Back(), Back(), SelectBusiness("b2"))

    assert state.draft.business_id == "b2"
    assert state.draft.service_id is None and state.draft.staff_id is None
    assert state.draft.date is None and state.draft.time is None
    assert state.draft.customer_name == "Emma"
    assert state.catalog is None and state.catalog_loading


def test_back_is_not_allowed_on_first_step_or_while_submitting():
    with pytest.raises(InvalidTransitionError):
        transition(WizardState(), Back())

    submitting, _ = _apply(_filled(), Submit())
    with pytest.raises(InvalidTransitionError):
        transition(submitting, Back())
    with pytest.raises(InvalidTransitionError):
        transition(submitting, EditDetails((("notes", "x"),)))


def test_leave_discards_draft_and_outranks_in_flight_loads():
    state, _ = _apply(WizardState(), BusinessesLoaded(BUSINESSES), SelectBusiness("b1"))
    pending = _catalog_loaded(state)

    state, _ = _apply(state, Leave())
    assert state.draft == BookingDraft()
    assert state.businesses == BUSINESSES

    after, _ = _apply(state, pending)
    assert after == state
