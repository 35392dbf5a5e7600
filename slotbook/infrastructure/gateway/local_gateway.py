from __future__ import annotations

import asyncio

from slotbook.application.exceptions import ValidationError
from slotbook.application.ports.catalog import CatalogPort
from slotbook.application.ports.reservation import ReservationPort
from slotbook.application.use_cases.availability import AvailabilityUseCase
from slotbook.application.use_cases.catalog import CatalogUseCase
from slotbook.application.use_cases.reservation import ReservationUseCase
from slotbook.application.utils.time_parser import format_24h, parse_iso_date
from slotbook.domain.entities.appointment import AppointmentView
from slotbook.domain.entities.business import Business
from slotbook.domain.entities.reservation import ReservationRequest
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class LocalBookingGateway(CatalogPort, ReservationPort):
    """Runs the use cases in-process; store work happens off the event loop."""

    def __init__(
        self,
        catalog: CatalogUseCase,
        availability: AvailabilityUseCase,
        reservations: ReservationUseCase,
    ) -> None:
        self._catalog = catalog
        self._availability = availability
        self._reservations = reservations

    async def list_businesses(self) -> list[Business]:
        return await asyncio.to_thread(self._catalog.list_businesses)

    async def list_services(self, business_id: str) -> list[Service]:
        return await asyncio.to_thread(self._catalog.list_services, business_id)

    async def list_staff(self, business_id: str) -> list[StaffMember]:
        return await asyncio.to_thread(self._catalog.list_staff, business_id)

    async def list_available_slots(
        self,
        business_id: str,
        service_id: str,
        staff_id: str | None,
        date: str,
    ) -> list[str]:
        return await asyncio.to_thread(self._available_slots, business_id, service_id, staff_id, date)

    async def submit(self, request: ReservationRequest) -> AppointmentView:
        return await asyncio.to_thread(self._reservations.submit, request)

    def _available_slots(self, business_id: str, service_id: str, staff_id: str | None, date: str) -> list[str]:
        day = parse_iso_date(date)
        if day is None:
            raise ValidationError(f"Invalid date: {date}", ["date"])
        slots = self._availability.slots_for_service(business_id, service_id, day, staff_id)
        return [format_24h(s) for s in slots]
