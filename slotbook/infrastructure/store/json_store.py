from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import date, time
from pathlib import Path
from typing import Any

from slotbook.domain.entities.appointment import Appointment, AppointmentStatus
from slotbook.domain.entities.business import Business, BusinessCategory
from slotbook.domain.entities.customer import Customer, normalize_email
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember
from slotbook.infrastructure.store.memory_store import MemoryBookingStore


class JsonBookingStore(MemoryBookingStore):
    """MemoryBookingStore that writes every committed transaction to a JSON file."""

    def __init__(self, data_dir: str = "./data") -> None:
        super().__init__()
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / "booking_store.json"
        self._logger = logging.getLogger(__name__)
        self._load()

    def _load(self) -> None:
        """Load tables from disk; a missing or corrupted file starts empty."""
        if not self._file_path.exists():
            return

        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.error("Booking store file unreadable, starting empty", extra={"reason": str(e)})
            return

        with self._lock:
            self._businesses = {b["id"]: _business_from_dict(b) for b in data.get("businesses", [])}
            self._services = {s["id"]: _service_from_dict(s) for s in data.get("services", [])}
            self._staff = {m["id"]: _staff_from_dict(m) for m in data.get("staff", [])}
            self._customers = {c["id"]: Customer(**c) for c in data.get("customers", [])}
            self._customer_by_email = {}
            for customer in self._customers.values():
                email = normalize_email(customer.email)
                if email is not None:
                    self._customer_by_email[(customer.business_id, email)] = customer.id
            self._appointments = {a["id"]: _appointment_from_dict(a) for a in data.get("appointments", [])}

    def _commit(self) -> None:
        """Save all tables to the JSON file atomically."""
        data = {
            "version": 1,
            "businesses": [_to_json(b) for b in self._businesses.values()],
            "services": [_to_json(s) for s in self._services.values()],
            "staff": [_to_json(m) for m in self._staff.values()],
            "customers": [_to_json(c) for c in self._customers.values()],
            "appointments": [_to_json(a) for a in self._appointments.values()],
        }
        temp_path = self._file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self._file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise


def _to_json(entity: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in asdict(entity).items():
        if isinstance(value, (date, time)):
            out[key] = value.isoformat()
        elif isinstance(value, (BusinessCategory, AppointmentStatus)):
            out[key] = value.value
        elif isinstance(value, tuple):
            out[key] = list(value)
        else:
            out[key] = value
    return out


def _business_from_dict(data: dict[str, Any]) -> Business:
    return Business(**{**data, "category": BusinessCategory(data["category"])})


def _service_from_dict(data: dict[str, Any]) -> Service:
    return Service(**data)


def _staff_from_dict(data: dict[str, Any]) -> StaffMember:
    return StaffMember(**{**data, "specialties": tuple(data.get("specialties") or ())})


def _appointment_from_dict(data: dict[str, Any]) -> Appointment:
    return Appointment(
        **{
            **data,
            "date": date.fromisoformat(data["date"]),
            "start_time": time.fromisoformat(data["start_time"]),
            "end_time": time.fromisoformat(data["end_time"]),
            "status": AppointmentStatus(data["status"]),
        }
    )
