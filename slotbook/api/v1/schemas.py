from __future__ import annotations

from pydantic import BaseModel, Field

from slotbook.application.utils.time_parser import format_24h
from slotbook.domain.entities.appointment import AppointmentStatus, AppointmentView
from slotbook.domain.entities.business import Business, BusinessCategory
from slotbook.domain.entities.customer import Customer
from slotbook.domain.entities.reservation import ReservationRequest
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember


class BusinessSchema(BaseModel):
    id: str
    name: str
    type: BusinessCategory
    address: str | None = None

    @staticmethod
    def from_entity(business: Business) -> "BusinessSchema":
        return BusinessSchema(id=business.id, name=business.name, type=business.category, address=business.address)


class ServiceSchema(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: float
    category: str | None = None
    description: str | None = None

    @staticmethod
    def from_entity(service: Service) -> "ServiceSchema":
        return ServiceSchema(
            id=service.id,
            name=service.name,
            duration_minutes=service.duration_minutes,
            price=service.price,
            category=service.category,
            description=service.description,
        )


class StaffSchema(BaseModel):
    id: str
    name: str
    specialties: list[str] = Field(default_factory=list)

    @staticmethod
    def from_entity(staff: StaffMember) -> "StaffSchema":
        return StaffSchema(id=staff.id, name=staff.name, specialties=list(staff.specialties))


class SlotsResponseSchema(BaseModel):
    date: str
    slots: list[str]


class CustomerSchema(BaseModel):
    id: str
    name: str
    email: str | None = None
    phone: str | None = None

    @staticmethod
    def from_entity(customer: Customer) -> "CustomerSchema":
        return CustomerSchema(id=customer.id, name=customer.name, email=customer.email, phone=customer.phone)


class AppointmentStaffSchema(BaseModel):
    id: str
    name: str


class AppointmentServiceSchema(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: float


class ReservationRequestSchema(BaseModel):
    # required fields default to "" so missing ones get the same error shape as empty ones
    business_id: str = ""
    service_id: str = ""
    staff_id: str | None = None
    date: str = ""
    time: str = ""
    customer_name: str = ""
    customer_email: str = ""
    customer_phone: str | None = None
    notes: str | None = None

    def to_request(self) -> ReservationRequest:
        return ReservationRequest(
            business_id=self.business_id,
            service_id=self.service_id,
            staff_id=self.staff_id or None,
            date=self.date,
            time=self.time,
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            customer_phone=self.customer_phone,
            notes=self.notes,
        )


class AppointmentSchema(BaseModel):
    id: str
    business_id: str
    customer: CustomerSchema
    staff: AppointmentStaffSchema | None = None
    service: AppointmentServiceSchema | None = None
    date: str
    start_time: str
    end_time: str
    status: AppointmentStatus
    notes: str | None = None

    @staticmethod
    def from_view(view: AppointmentView) -> "AppointmentSchema":
        appointment = view.appointment
        return AppointmentSchema(
            id=appointment.id,
            business_id=appointment.business_id,
            customer=CustomerSchema.from_entity(view.customer),
            staff=AppointmentStaffSchema(id=view.staff.id, name=view.staff.name) if view.staff else None,
            service=(
                AppointmentServiceSchema(
                    id=view.service.id,
                    name=view.service.name,
                    duration_minutes=view.service.duration_minutes,
                    price=view.service.price,
                )
                if view.service
                else None
            ),
            date=appointment.date.isoformat(),
            start_time=format_24h(appointment.start_time),
            end_time=format_24h(appointment.end_time),
            status=appointment.status,
            notes=appointment.notes,
        )


class StatusUpdateSchema(BaseModel):
    status: AppointmentStatus


class ErrorDetailSchema(BaseModel):
    kind: str
    message: str
    fields: list[str] = Field(default_factory=list)
