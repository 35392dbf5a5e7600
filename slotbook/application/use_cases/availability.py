from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta

from slotbook.application.exceptions import NotFoundError, ValidationError
from slotbook.application.ports.booking_store import BookingStorePort
from slotbook.application.utils.time_parser import add_minutes
from slotbook.domain.entities.business_hours import BusinessHours


class AvailabilityUseCase:
    def __init__(
        self,
        store: BookingStorePort,
        default_hours: BusinessHours,
        interval_minutes: int = 30,
        hours_by_business: dict[str, BusinessHours] | None = None,
    ) -> None:
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self._store = store
        self._default_hours = default_hours
        self._interval = interval_minutes
        self._hours_by_business = dict(hours_by_business or {})
        self._logger = logging.getLogger(__name__)

    def set_business_hours(self, business_id: str, hours: BusinessHours) -> None:
        self._hours_by_business[business_id] = hours

    def hours_for(self, business_id: str) -> BusinessHours:
        return self._hours_by_business.get(business_id, self._default_hours)

    def candidate_slots(self, business_id: str, day: date) -> list[time]:
        """Every start time inside business hours, ignoring bookings and duration."""
        slots: list[time] = []
        for open_, close in self.hours_for(business_id).windows_for(day):
            current = datetime.combine(day, open_)
            end = datetime.combine(day, close)
            while current < end:
                slots.append(current.time())
                current += timedelta(minutes=self._interval)
        return slots

    def slots_for_service(
        self,
        business_id: str,
        service_id: str,
        day: date,
        staff_id: str | None = None,
    ) -> list[time]:
        service = self._store.get_service(service_id)
        if service is None or service.business_id != business_id or not service.is_active:
            raise NotFoundError(f"Service {service_id} not found")
        return self.available_slots(business_id, day, service.duration_minutes, staff_id)

    def available_slots(
        self,
        business_id: str,
        day: date,
        duration_minutes: int,
        staff_id: str | None = None,
    ) -> list[time]:
        """
        Start times whose [start, start + duration) fits inside one business-hours
        window and overlaps no non-cancelled appointment of the staff member.

        Without a staff member a start is available when any active staff member
        of the business is free at that time, or when the business has no staff.
        """
        if duration_minutes <= 0:
            raise ValidationError("Service duration must be positive", ["duration_minutes"])

        with self._store.atomic():
            if self._store.get_business(business_id) is None:
                raise NotFoundError(f"Business {business_id} not found")

            if staff_id is not None:
                staff = self._store.get_staff(staff_id)
                if staff is None or staff.business_id != business_id or not staff.is_active:
                    raise NotFoundError(f"Staff member {staff_id} not found")
                candidates: list[str | None] = [staff_id]
            else:
                candidates = [m.id for m in self._store.list_staff(business_id) if m.is_active] or [None]

            busy: dict[str | None, list[tuple[time, time]]] = {}
            for candidate in candidates:
                if candidate is None:
                    busy[candidate] = []
                    continue
                busy[candidate] = [
                    (a.start_time, a.end_time)
                    for a in self._store.list_appointments(business_id, day=day, staff_id=candidate)
                    if a.blocks_slot
                ]

        hours = self.hours_for(business_id)
        available: list[time] = []
        for start in self.candidate_slots(business_id, day):
            end = add_minutes(start, duration_minutes)
            if end is None or not hours.contains(day, start, end):
                continue
            if any(_is_free(busy[c], start, end) for c in candidates):
                available.append(start)

        self._logger.debug(
            "Computed availability",
            extra={"business_id": business_id, "date": day.isoformat(), "count": len(available)},
        )
        return available


def _is_free(intervals: list[tuple[time, time]], start: time, end: time) -> bool:
    return all(not (start < busy_end and busy_start < end) for busy_start, busy_end in intervals)
