from __future__ import annotations

from slotbook.application.exceptions import NotFoundError
from slotbook.application.ports.booking_store import BookingStorePort
from slotbook.domain.entities.business import Business
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class CatalogUseCase:
    """Read-only catalog queries. Inactive entries are never returned."""

    def __init__(self, store: BookingStorePort) -> None:
        self._store = store

    def list_businesses(self) -> list[Business]:
        return sorted(self._store.list_businesses(), key=lambda b: (b.name.lower(), b.id))

    def get_business(self, business_id: str) -> Business:
        business = self._store.get_business(business_id)
        if business is None:
            raise NotFoundError(f"Business {business_id} not found")
        return business

    def list_services(self, business_id: str) -> list[Service]:
        self.get_business(business_id)
        services = [s for s in self._store.list_services(business_id) if s.is_active]
        # uncategorized first, like a SQL ascending sort with NULLS FIRST
        return sorted(services, key=lambda s: (s.category is not None, (s.category or "").lower(), s.name.lower(), s.id))

    def list_staff(self, business_id: str) -> list[StaffMember]:
        self.get_business(business_id)
        staff = [m for m in self._store.list_staff(business_id) if m.is_active]
        return sorted(staff, key=lambda m: (m.name.lower(), m.id))
