from __future__ import annotations

from abc import ABC, abstractmethod

from slotbook.domain.entities.appointment import AppointmentView
from slotbook.domain.entities.reservation import ReservationRequest


class ReservationPort(ABC):
    @abstractmethod
    async def submit(self, request: ReservationRequest) -> AppointmentView:
        """
        Create exactly one appointment for the request.

        Raises ValidationError, NotFoundError, SlotConflictError or
        TransientServiceError. Nothing is persisted when it raises.
        """
        raise NotImplementedError
