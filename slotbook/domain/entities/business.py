from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BusinessCategory(str, Enum):
    clinic = "clinic"
    salon = "salon"
    spa = "spa"


@dataclass(frozen=True)
class Business:
    id: str
    name: str
    category: BusinessCategory
    address: str | None = None
    email: str | None = None
    phone: str | None = None
