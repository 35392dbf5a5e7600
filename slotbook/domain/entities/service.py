from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    id: str
    business_id: str
    name: str
    duration_minutes: int
    price: float
    category: str | None = None
    description: str | None = None
    is_active: bool = True
