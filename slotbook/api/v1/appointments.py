from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from slotbook.api.v1.errors import to_http_exception
from slotbook.api.v1.schemas import AppointmentSchema, ReservationRequestSchema, StatusUpdateSchema
from slotbook.application.exceptions import BookingError
from slotbook.application.use_cases.reservation import ReservationUseCase
from slotbook.wiring.dependencies import get_reservation_use_case

router = APIRouter(prefix="/appointments")
logger = logging.getLogger(__name__)


@router.post("", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: ReservationRequestSchema,
    uc: ReservationUseCase = Depends(get_reservation_use_case),
):
    try:
        view = uc.submit(req.to_request())
    except BookingError as e:
        logger.info("Reservation rejected", extra={"business_id": req.business_id, "kind": e.kind, "reason": e.message})
        raise to_http_exception(e)
    return AppointmentSchema.from_view(view)


@router.get("/{appointment_id}", response_model=AppointmentSchema)
def get_appointment(appointment_id: str, uc: ReservationUseCase = Depends(get_reservation_use_case)):
    try:
        return AppointmentSchema.from_view(uc.get_appointment(appointment_id))
    except BookingError as e:
        raise to_http_exception(e)


@router.patch("/{appointment_id}/status", response_model=AppointmentSchema)
def update_status(
    appointment_id: str,
    req: StatusUpdateSchema,
    uc: ReservationUseCase = Depends(get_reservation_use_case),
):
    try:
        return AppointmentSchema.from_view(uc.update_status(appointment_id, req.status))
    except BookingError as e:
        raise to_http_exception(e)
