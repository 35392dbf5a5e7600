"""
Tests for the async wizard driver: effect execution, stale results,
timeouts and failure handling.
"""

from __future__ import annotations

import asyncio

import pytest

from slotbook.application.exceptions import SlotConflictError, TransientServiceError, ValidationError
from slotbook.application.ports.catalog import CatalogPort
from slotbook.application.ports.reservation import ReservationPort
from slotbook.application.use_cases.booking_wizard import BookingWizard
from slotbook.domain.entities.booking_draft import WizardStep
from slotbook.domain.entities.business import Business, BusinessCategory
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember

BUSINESSES = [
    Business(id="b1", name="Bright Smile Dental", category=BusinessCategory.clinic),
    Business(id="b2", name="Luxe Hair Studio", category=BusinessCategory.salon),
]
SERVICES = {
    "b1": [Service(id="s1", business_id="b1", name="Cleaning", duration_minutes=60, price=120.0, category="preventive")],
    "b2": [Service(id="b2-svc-2", business_id="b2", name="Haircut", duration_minutes=45, price=55.0, category="hair")],
}
STAFF = {
    "b1": [StaffMember(id="st1", business_id="b1", name="Dr. Johnson", specialties=("preventive",))],
    "b2": [StaffMember(id="b2-staff-1", business_id="b2", name="Maria Lopez", specialties=("hair",))],
}


class FakeBookingService(CatalogPort, ReservationPort):
    """Catalog and reservation service whose calls can be held open or made to fail."""

    def __init__(self) -> None:
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: dict[str, Exception] = {}
        self.submitted = []

    async def _wait(self, key: str) -> None:
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if key in self.failures:
            raise self.failures[key]

    async def list_businesses(self):
        await self._wait("businesses")
        return list(BUSINESSES)

    async def list_services(self, business_id):
        await self._wait(f"services:{business_id}")
        return list(SERVICES[business_id])

    async def list_staff(self, business_id):
        await self._wait(f"staff:{business_id}")
        return list(STAFF[business_id])

    async def list_available_slots(self, business_id, service_id, staff_id, date):
        await self._wait("slots")
        return ["09:00", "09:30"]

    async def submit(self, request):
        self.submitted.append(request)
        await self._wait("submit")
        raise AssertionError("submit outcome not configured")


def _wizard(service: FakeBookingService, **kwargs) -> BookingWizard:
    return BookingWizard(catalog=service, reservations=service, **kwargs)


async def _details(wizard: BookingWizard) -> None:
    await wizard.start()
    await wizard.select_business("b1")
    await wizard.select_service("s1")
    await wizard.select_staff("st1")
    await wizard.edit_details(
        date="2025-06-10",
        time="09:00",
        customer_name="Emma",
        customer_email="emma@example.com",
    )


def test_last_selected_business_wins_when_first_load_is_slow():
    async def scenario():
        service = FakeBookingService()
        service.gates["services:b1"] = asyncio.Event()
        wizard = _wizard(service)
        await wizard.start()

        first = asyncio.create_task(wizard.select_business("b1"))
        await asyncio.sleep(0)
        await wizard.select_business("b2")
        assert wizard.state.catalog.business_id == "b2"

        service.gates["services:b1"].set()
        await first
        return wizard.state

    state = asyncio.run(scenario())

    assert state.step == WizardStep.SELECT_SERVICE
    assert state.draft.business_id == "b2"
    assert state.catalog.business_id == "b2"
    assert [s.name for s in state.catalog.services] == ["Haircut"]


def test_last_selected_business_wins_when_first_load_returns_first():
    async def scenario():
        service = FakeBookingService()
        service.gates["services:b1"] = asyncio.Event()
        service.gates["services:b2"] = asyncio.Event()
        wizard = _wizard(service)
        await wizard.start()

        first = asyncio.create_task(wizard.select_business("b1"))
        await asyncio.sleep(0)
        second = asyncio.create_task(wizard.select_business("b2"))
        await asyncio.sleep(0)
        assert wizard.state.draft.business_id == "b2"

        service.gates["services:b1"].set()
        await first
        in_between = wizard.state

        service.gates["services:b2"].set()
        await second
        return in_between, wizard.state

    in_between, state = asyncio.run(scenario())

    assert in_between.step == WizardStep.SELECT_BUSINESS
    assert in_between.catalog is None
    assert in_between.catalog_loading
    assert state.step == WizardStep.SELECT_SERVICE
    assert state.draft.business_id == "b2"
    assert state.catalog.business_id == "b2"


def test_catalog_failure_keeps_first_step_and_retry_recovers():
    async def scenario():
        service = FakeBookingService()
        service.failures["staff:b1"] = TransientServiceError("Catalog unavailable")
        wizard = _wizard(service)
        await wizard.start()

        failed = await wizard.select_business("b1")
        service.failures.clear()
        recovered = await wizard.retry_catalog()
        return failed, recovered

    failed, recovered = asyncio.run(scenario())

    assert failed.step == WizardStep.SELECT_BUSINESS
    assert failed.load_error is not None and failed.load_error.kind == "transient"
    assert failed.catalog is None
    assert recovered.step == WizardStep.SELECT_SERVICE
    assert recovered.load_error is None


def test_slow_catalog_times_out_as_transient():
    async def scenario():
        service = FakeBookingService()
        service.gates["services:b1"] = asyncio.Event()  # never released
        wizard = _wizard(service, load_timeout=0.05)
        await wizard.start()
        return await wizard.select_business("b1")

    state = asyncio.run(scenario())

    assert state.step == WizardStep.SELECT_BUSINESS
    assert not state.catalog_loading
    assert state.load_error.kind == "transient"
    assert "timed out" in state.load_error.message


def test_unexpected_errors_become_transient_failures():
    async def scenario():
        service = FakeBookingService()
        service.failures["businesses"] = ConnectionError("boom")
        wizard = _wizard(service)
        return await wizard.start()

    state = asyncio.run(scenario())

    assert state.businesses == ()
    assert state.load_error.kind == "transient"


def test_slots_are_loaded_once_a_date_is_set():
    async def scenario():
        service = FakeBookingService()
        wizard = _wizard(service)
        await _details(wizard)
        return wizard.state

    state = asyncio.run(scenario())

    assert state.step == WizardStep.DETAILS
    assert state.slots == ("09:00", "09:30")
    assert not state.slots_loading


def test_submit_with_missing_fields_never_reaches_the_service():
    async def scenario():
        service = FakeBookingService()
        wizard = _wizard(service)
        await wizard.start()
        await wizard.select_business("b1")
        await wizard.select_service("s1")
        await wizard.select_staff("st1")
        await wizard.edit_details(customer_name="Emma")
        before = wizard.state
        with pytest.raises(ValidationError) as exc:
            await wizard.submit()
        return service, before, wizard.state, exc.value

    service, before, after, error = asyncio.run(scenario())

    assert service.submitted == []
    assert after == before
    assert set(error.fields) == {"date", "time", "customer_email"}


def test_conflict_is_reported_and_draft_kept():
    async def scenario():
        service = FakeBookingService()
        service.failures["submit"] = SlotConflictError("That time was just booked")
        wizard = _wizard(service)
        await _details(wizard)
        draft = wizard.state.draft
        state = await wizard.submit()
        return service, draft, state

    service, draft, state = asyncio.run(scenario())

    assert len(service.submitted) == 1
    assert state.step == WizardStep.DETAILS
    assert state.draft == draft
    assert state.error.kind == "slot_conflict"
    assert not state.submitting


def test_double_submit_calls_the_service_once():
    async def scenario():
        service = FakeBookingService()
        service.gates["submit"] = asyncio.Event()
        service.failures["submit"] = TransientServiceError("Backend unavailable")
        wizard = _wizard(service)
        await _details(wizard)

        first = asyncio.create_task(wizard.submit())
        await asyncio.sleep(0)
        assert wizard.state.submitting
        await wizard.submit()

        service.gates["submit"].set()
        await first
        return service, wizard.state

    service, state = asyncio.run(scenario())

    assert len(service.submitted) == 1
    assert state.error.kind == "transient"


def test_full_booking_over_the_local_gateway(gateway, store):
    async def scenario():
        wizard = BookingWizard(catalog=gateway, reservations=gateway)
        await wizard.start()
        await wizard.select_business("b1")
        await wizard.select_service("s1")
        await wizard.select_staff("st1")
        await wizard.edit_details(date="2025-06-10")
        slots = wizard.state.slots
        await wizard.edit_details(time="9:00 AM", customer_name="Emma", customer_email="emma@example.com")
        return slots, await wizard.submit()

    slots, state = asyncio.run(scenario())

    assert slots[0] == "09:00"
    assert state.step == WizardStep.CONFIRMED
    view = state.appointment
    assert view.appointment.end_time.isoformat() == "10:00:00"
    assert view.staff.name == "Dr. Johnson"
    assert len(store.list_appointments("b1")) == 1
