from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReservationRequest:
    business_id: str
    service_id: str
    date: str  # ISO date
    time: str  # "h:mm AM/PM" or "HH:MM"
    customer_name: str
    customer_email: str
    staff_id: str | None = None
    customer_phone: str | None = None
    notes: str | None = None
