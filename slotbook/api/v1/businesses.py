from __future__ import annotations

from datetime import date as Date

from fastapi import APIRouter, Depends, Query

from slotbook.api.v1.errors import to_http_exception
from slotbook.api.v1.schemas import (
    AppointmentSchema,
    BusinessSchema,
    CustomerSchema,
    ServiceSchema,
    SlotsResponseSchema,
    StaffSchema,
)
from slotbook.application.exceptions import BookingError, ValidationError
from slotbook.application.use_cases.availability import AvailabilityUseCase
from slotbook.application.use_cases.catalog import CatalogUseCase
from slotbook.application.use_cases.reservation import ReservationUseCase
from slotbook.application.utils.time_parser import format_24h, parse_iso_date
from slotbook.wiring.dependencies import (
    get_availability_use_case,
    get_catalog_use_case,
    get_reservation_use_case,
)

router = APIRouter(prefix="/businesses")


def _parse_day(value: str | None) -> Date | None:
    if value is None:
        return None
    day = parse_iso_date(value)
    if day is None:
        raise ValidationError(f"Invalid date: {value}", ["date"])
    return day


@router.get("", response_model=list[BusinessSchema])
def list_businesses(uc: CatalogUseCase = Depends(get_catalog_use_case)):
    return [BusinessSchema.from_entity(b) for b in uc.list_businesses()]


@router.get("/{business_id}/services", response_model=list[ServiceSchema])
def list_services(business_id: str, uc: CatalogUseCase = Depends(get_catalog_use_case)):
    try:
        return [ServiceSchema.from_entity(s) for s in uc.list_services(business_id)]
    except BookingError as e:
        raise to_http_exception(e)


@router.get("/{business_id}/staff", response_model=list[StaffSchema])
def list_staff(business_id: str, uc: CatalogUseCase = Depends(get_catalog_use_case)):
    try:
        return [StaffSchema.from_entity(m) for m in uc.list_staff(business_id)]
    except BookingError as e:
        raise to_http_exception(e)


@router.get("/{business_id}/slots", response_model=SlotsResponseSchema)
def list_slots(
    business_id: str,
    date: str = Query(...),
    service_id: str = Query(...),
    staff_id: str | None = Query(None),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        day = _parse_day(date)
        slots = uc.slots_for_service(business_id, service_id, day, staff_id)
    except BookingError as e:
        raise to_http_exception(e)
    return SlotsResponseSchema(date=day.isoformat(), slots=[format_24h(s) for s in slots])


@router.get("/{business_id}/appointments", response_model=list[AppointmentSchema])
def list_appointments(
    business_id: str,
    date: str | None = Query(None),
    uc: ReservationUseCase = Depends(get_reservation_use_case),
):
    try:
        views = uc.list_appointments(business_id, _parse_day(date))
    except BookingError as e:
        raise to_http_exception(e)
    return [AppointmentSchema.from_view(v) for v in views]


@router.get("/{business_id}/customers", response_model=list[CustomerSchema])
def list_customers(business_id: str, uc: ReservationUseCase = Depends(get_reservation_use_case)):
    try:
        return [CustomerSchema.from_entity(c) for c in uc.list_customers(business_id)]
    except BookingError as e:
        raise to_http_exception(e)
