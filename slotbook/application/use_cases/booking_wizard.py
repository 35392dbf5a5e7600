from __future__ import annotations

import asyncio
import logging

from slotbook.application.exceptions import BookingError, ValidationError
from slotbook.application.ports.catalog import CatalogPort
from slotbook.application.ports.reservation import ReservationPort
from slotbook.application.use_cases.wizard_machine import Effect, transition
from slotbook.domain.entities.booking_draft import WizardStep
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
from slotbook.domain.entities.wizard_state import BookingFailure, WizardState


class BookingWizard:
    """
    Drives one customer's booking session.

    State changes go through `transition`; this class only runs the effects it
    asks for (with timeouts) and feeds the outcomes back in. Service failures
    never escape: they end up in `state.error` / `state.load_error` so the
    caller can show them and let the customer retry.
    """

    def __init__(
        self,
        catalog: CatalogPort,
        reservations: ReservationPort,
        load_timeout: float = 15.0,
        submit_timeout: float = 20.0,
        state: WizardState | None = None,
    ) -> None:
        self._catalog = catalog
        self._reservations = reservations
        self._load_timeout = load_timeout
        self._submit_timeout = submit_timeout
        self._state = state or WizardState()
        self._logger = logging.getLogger(__name__)

    @property
    def state(self) -> WizardState:
        return self._state

    async def dispatch(self, event: object) -> WizardState:
        result = transition(self._state, event)
        if result.state.step != self._state.step:
            self._logger.info(
                "Wizard step changed",
                extra={"step": result.state.step.name, "event": type(event).__name__},
            )
        self._state = result.state
        if result.effects:
            await asyncio.gather(*(self._run(effect) for effect in result.effects))
        return self._state

    async def start(self) -> WizardState:
        return await self.dispatch(Start())

    async def select_business(self, business_id: str) -> WizardState:
        return await self.dispatch(SelectBusiness(business_id))

    async def retry_catalog(self) -> WizardState:
        return await self.dispatch(RetryCatalog())

    async def select_service(self, service_id: str) -> WizardState:
        return await self.dispatch(SelectService(service_id))

    async def select_staff(self, staff_id: str) -> WizardState:
        return await self.dispatch(SelectStaff(staff_id))

    async def edit_details(self, **changes: str | None) -> WizardState:
        return await self.dispatch(EditDetails(tuple(changes.items())))

    async def submit(self) -> WizardState:
        """
        Submit the draft once. Missing required fields raise ValidationError
        without touching the state or calling the reservation service.
        """
        if self._state.step == WizardStep.DETAILS and not self._state.submitting:
            missing = self._state.draft.missing_required_fields()
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing)
        return await self.dispatch(Submit())

    async def back(self) -> WizardState:
        return await self.dispatch(Back())

    async def leave(self) -> WizardState:
        return await self.dispatch(Leave())

    async def _run(self, effect: Effect) -> None:
        if isinstance(effect, LoadBusinesses):
            await self._load_businesses()
        elif isinstance(effect, LoadCatalog):
            await self._load_catalog(effect)
        elif isinstance(effect, LoadSlots):
            await self._load_slots(effect)
        elif isinstance(effect, SubmitReservation):
            await self._submit(effect)
        else:
            raise TypeError(f"Unknown wizard effect: {type(effect).__name__}")

    async def _load_businesses(self) -> None:
        try:
            businesses = await asyncio.wait_for(self._catalog.list_businesses(), self._load_timeout)
        except Exception as e:
            await self.dispatch(BusinessesLoadFailed(self._failure(e, "Loading businesses")))
            return
        await self.dispatch(BusinessesLoaded(tuple(businesses)))

    async def _load_catalog(self, effect: LoadCatalog) -> None:
        try:
            services, staff = await asyncio.wait_for(
                asyncio.gather(
                    self._catalog.list_services(effect.business_id),
                    self._catalog.list_staff(effect.business_id),
                ),
                self._load_timeout,
            )
        except Exception as e:
            failure = self._failure(e, "Loading services and staff")
            await self.dispatch(CatalogLoadFailed(effect.generation, effect.business_id, failure))
            return

        if effect.generation != self._state.generation:
            self._logger.info(
                "Discarding stale catalog",
                extra={"business_id": effect.business_id, "generation": effect.generation},
            )
        await self.dispatch(CatalogLoaded(effect.generation, effect.business_id, tuple(services), tuple(staff)))

    async def _load_slots(self, effect: LoadSlots) -> None:
        try:
            slots = await asyncio.wait_for(
                self._catalog.list_available_slots(
                    effect.business_id,
                    effect.service_id,
                    effect.staff_id,
                    effect.date,
                ),
                self._load_timeout,
            )
        except Exception as e:
            await self.dispatch(SlotsLoadFailed(effect.slot_generation, self._failure(e, "Loading time slots")))
            return
        await self.dispatch(SlotsLoaded(effect.slot_generation, tuple(slots)))

    async def _submit(self, effect: SubmitReservation) -> None:
        try:
            appointment = await asyncio.wait_for(self._reservations.submit(effect.request), self._submit_timeout)
        except Exception as e:
            failure = self._failure(e, "Booking the appointment")
            self._logger.warning(
                "Booking submission failed",
                extra={"business_id": effect.request.business_id, "kind": failure.kind, "reason": failure.message},
            )
            await self.dispatch(SubmissionFailed(effect.submission_id, failure))
            return
        await self.dispatch(SubmissionSucceeded(effect.submission_id, appointment))

    def _failure(self, error: Exception, action: str) -> BookingFailure:
        if isinstance(error, ValidationError):
            return BookingFailure(kind=error.kind, message=error.message, fields=error.fields)
        if isinstance(error, BookingError):
            return BookingFailure(kind=error.kind, message=error.message)
        if isinstance(error, asyncio.TimeoutError):
            return BookingFailure(kind="transient", message=f"{action} timed out. Please try again.")
        self._logger.exception("Unexpected booking error", extra={"reason": str(error)})
        return BookingFailure(kind="transient", message=f"{action} failed. Please try again.")
