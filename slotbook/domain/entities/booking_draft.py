from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from slotbook.domain.entities.reservation import ReservationRequest


class WizardStep(IntEnum):
    SELECT_BUSINESS = 1
    SELECT_SERVICE = 2
    SELECT_STAFF = 3
    DETAILS = 4
    CONFIRMED = 5


REQUIRED_FOR_SUBMIT = ("business_id", "service_id", "date", "time", "customer_name", "customer_email")
CONTACT_FIELDS = ("customer_name", "customer_email", "customer_phone", "notes")
DETAIL_FIELDS = ("date", "time") + CONTACT_FIELDS


@dataclass(frozen=True)
class BookingDraft:
    business_id: str | None = None
    service_id: str | None = None
    staff_id: str | None = None
    date: str | None = None  # ISO date
    time: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    notes: str | None = None

    def missing_required_fields(self) -> list[str]:
        return [name for name in REQUIRED_FOR_SUBMIT if not (getattr(self, name) or "").strip()]

    def with_changes(self, **changes: str | None) -> "BookingDraft":
        return replace(self, **changes)

    def to_request(self) -> ReservationRequest:
        missing = self.missing_required_fields()
        if missing:
            raise ValueError(f"Draft is missing required fields: {', '.join(missing)}")
        return ReservationRequest(
            business_id=self.business_id or "",
            service_id=self.service_id or "",
            date=(self.date or "").strip(),
            time=(self.time or "").strip(),
            customer_name=(self.customer_name or "").strip(),
            customer_email=(self.customer_email or "").strip(),
            staff_id=self.staff_id or None,
            customer_phone=_blank_to_none(self.customer_phone),
            notes=_blank_to_none(self.notes),
        )


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
