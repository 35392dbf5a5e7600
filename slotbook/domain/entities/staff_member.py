from __future__ import annotations

from dataclasses import dataclass

from slotbook.domain.entities.service import Service


@dataclass(frozen=True)
class StaffMember:
    id: str
    business_id: str
    name: str
    specialties: tuple[str, ...] = ()
    email: str | None = None
    phone: str | None = None
    is_active: bool = True

    def offers(self, service: Service) -> bool:
        """Staff without specialties take any service of their business."""
        if service.business_id != self.business_id:
            return False
        if not self.specialties:
            return True
        wanted = {(service.category or "").strip().lower(), service.name.strip().lower()}
        return any(s.strip().lower() in wanted for s in self.specialties if s.strip())
