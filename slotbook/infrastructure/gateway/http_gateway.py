from __future__ import annotations

import logging
from datetime import date, time
from typing import Any

import httpx

from slotbook.application.exceptions import (
    BookingError,
    NotFoundError,
    SlotConflictError,
    TransientServiceError,
    ValidationError,
)
from slotbook.application.ports.catalog import CatalogPort
from slotbook.application.ports.reservation import ReservationPort
from slotbook.domain.entities.appointment import Appointment, AppointmentStatus, AppointmentView
from slotbook.domain.entities.business import Business, BusinessCategory
from slotbook.domain.entities.customer import Customer
from slotbook.domain.entities.reservation import ReservationRequest
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class HttpBookingGateway(CatalogPort, ReservationPort):
    """Talks to a remote slotbook API under `<base_url>/api/v1`."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/") + "/api/v1"
        self._client = httpx.AsyncClient(base_url=self._base_url, timeout=timeout, transport=transport)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_businesses(self) -> list[Business]:
        data = await self._request("GET", "/businesses")
        return [
            Business(
                id=b["id"],
                name=b["name"],
                category=BusinessCategory(b["type"]),
                address=b.get("address"),
            )
            for b in data
        ]

    async def list_services(self, business_id: str) -> list[Service]:
        data = await self._request("GET", f"/businesses/{business_id}/services")
        return [
            Service(
                id=s["id"],
                business_id=business_id,
                name=s["name"],
                duration_minutes=int(s["duration_minutes"]),
                price=float(s["price"]),
                category=s.get("category"),
                description=s.get("description"),
            )
            for s in data
        ]

    async def list_staff(self, business_id: str) -> list[StaffMember]:
        data = await self._request("GET", f"/businesses/{business_id}/staff")
        return [
            StaffMember(
                id=m["id"],
                business_id=business_id,
                name=m["name"],
                specialties=tuple(m.get("specialties") or ()),
            )
            for m in data
        ]

    async def list_available_slots(
        self,
        business_id: str,
        service_id: str,
        staff_id: str | None,
        date: str,
    ) -> list[str]:
        params = {"date": date, "service_id": service_id}
        if staff_id:
            params["staff_id"] = staff_id
        data = await self._request("GET", f"/businesses/{business_id}/slots", params=params)
        return list(data.get("slots", []))

    async def submit(self, request: ReservationRequest) -> AppointmentView:
        payload = {
            "business_id": request.business_id,
            "service_id": request.service_id,
            "staff_id": request.staff_id,
            "date": request.date,
            "time": request.time,
            "customer_name": request.customer_name,
            "customer_email": request.customer_email,
            "customer_phone": request.customer_phone,
            "notes": request.notes,
        }
        data = await self._request("POST", "/appointments", json=payload)
        view = appointment_view_from_payload(data)
        self._logger.info(
            "Appointment booked remotely",
            extra={"appointment_id": view.id, "business_id": request.business_id},
        )
        return view

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            self._logger.error("Booking API timed out", extra={"path": path, "reason": str(e)})
            raise TransientServiceError("The booking service did not respond in time") from e
        except httpx.TransportError as e:
            self._logger.error("Booking API unreachable", extra={"path": path, "reason": str(e)})
            raise TransientServiceError("The booking service is unreachable") from e

        if response.status_code >= 400:
            raise _error_from_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise TransientServiceError("The booking service returned an unreadable response") from e


def _error_from_response(response: httpx.Response) -> BookingError:
    detail: dict[str, Any] = {}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("detail"), dict):
        detail = body["detail"]

    message = str(detail.get("message") or response.text or f"HTTP {response.status_code}")
    status = response.status_code
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return SlotConflictError(message)
    if status in (400, 422):
        return ValidationError(message, list(detail.get("fields") or ()))
    return TransientServiceError(message)


def appointment_view_from_payload(data: dict[str, Any]) -> AppointmentView:
    business_id = data["business_id"]
    customer = data["customer"]
    staff = data.get("staff")
    service = data.get("service")
    appointment = Appointment(
        id=data["id"],
        business_id=business_id,
        customer_id=customer["id"],
        staff_id=staff["id"] if staff else None,
        service_id=service["id"] if service else None,
        date=date.fromisoformat(data["date"]),
        start_time=time.fromisoformat(data["start_time"]),
        end_time=time.fromisoformat(data["end_time"]),
        status=AppointmentStatus(data["status"]),
        notes=data.get("notes"),
    )
    return AppointmentView(
        appointment=appointment,
        customer=Customer(
            id=customer["id"],
            business_id=business_id,
            name=customer["name"],
            email=customer.get("email"),
            phone=customer.get("phone"),
        ),
        staff=StaffMember(id=staff["id"], business_id=business_id, name=staff["name"]) if staff else None,
        service=(
            Service(
                id=service["id"],
                business_id=business_id,
                name=service["name"],
                duration_minutes=int(service["duration_minutes"]),
                price=float(service["price"]),
            )
            if service
            else None
        ),
    )
