from __future__ import annotations

from abc import ABC, abstractmethod

from slotbook.domain.entities.business import Business
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class CatalogPort(ABC):
    @abstractmethod
    async def list_businesses(self) -> list[Business]:
        """All businesses, ordered by name."""
        raise NotImplementedError

    @abstractmethod
    async def list_services(self, business_id: str) -> list[Service]:
        """Active services of a business, ordered by category then name."""
        raise NotImplementedError

    @abstractmethod
    async def list_staff(self, business_id: str) -> list[StaffMember]:
        """Active staff of a business, ordered by name."""
        raise NotImplementedError

    @abstractmethod
    async def list_available_slots(
        self,
        business_id: str,
        service_id: str,
        staff_id: str | None,
        date: str,
    ) -> list[str]:
        """Start times ("HH:MM") at which the service fits and the staff member is free."""
        raise NotImplementedError
