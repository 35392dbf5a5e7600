from __future__ import annotations

import logging

from slotbook.application.ports.booking_store import BookingStorePort
from slotbook.domain.entities.business import Business, BusinessCategory
from slotbook.domain.entities.service import Service
from slotbook.domain.entities.staff_member import StaffMember

logger = logging.getLogger(__name__)

# (name, duration_minutes, price, category)
DEFAULT_SERVICES: dict[BusinessCategory, list[tuple[str, int, float, str]]] = {
    BusinessCategory.clinic: [
        ("Checkup", 30, 80.0, "preventive"),
        ("Cleaning", 60, 120.0, "preventive"),
        ("Filling", 45, 150.0, "restorative"),
        ("Root Canal", 120, 900.0, "restorative"),
        ("Teeth Whitening", 90, 350.0, "cosmetic"),
    ],
    BusinessCategory.salon: [
        ("Blowout", 30, 40.0, "hair"),
        ("Haircut", 45, 55.0, "hair"),
        ("Hair Color", 120, 140.0, "hair"),
        ("Manicure", 45, 35.0, "nails"),
        ("Pedicure", 60, 45.0, "nails"),
    ],
    BusinessCategory.spa: [
        ("Swedish Massage", 60, 95.0, "massage"),
        ("Deep Tissue Massage", 90, 130.0, "massage"),
        ("Hydrating Facial", 60, 110.0, "skincare"),
        ("Body Scrub", 45, 70.0, "body"),
    ],
}

# (name, specialties)
DEFAULT_STAFF: dict[BusinessCategory, list[tuple[str, tuple[str, ...]]]] = {
    BusinessCategory.clinic: [
        ("Dr. Johnson", ("preventive", "cosmetic")),
        ("Dr. Smith", ("restorative", "preventive")),
        ("Dr. Brown", ("cosmetic",)),
    ],
    BusinessCategory.salon: [
        ("Maria Lopez", ("hair",)),
        ("Jessica Chen", ("nails", "hair")),
    ],
    BusinessCategory.spa: [
        ("Anna Berg", ("massage", "body")),
        ("Sophie Martin", ("skincare",)),
    ],
}


def seed_business_catalog(store: BookingStorePort, business: Business) -> None:
    """Give a newly registered business the default services and staff of its category."""
    with store.atomic():
        store.add_business(business)
        for n, (name, duration, price, category) in enumerate(DEFAULT_SERVICES[business.category], start=1):
            store.add_service(
                Service(
                    id=f"{business.id}-svc-{n}",
                    business_id=business.id,
                    name=name,
                    duration_minutes=duration,
                    price=price,
                    category=category,
                )
            )
        for n, (name, specialties) in enumerate(DEFAULT_STAFF[business.category], start=1):
            store.add_staff(
                StaffMember(
                    id=f"{business.id}-staff-{n}",
                    business_id=business.id,
                    name=name,
                    specialties=specialties,
                )
            )
    logger.info("Business catalog seeded", extra={"business_id": business.id})


def seed_demo_data(store: BookingStorePort) -> None:
    """Three demo businesses; "Bright Smile Dental" keeps short, stable ids."""
    with store.atomic():
        if store.get_business("b1") is not None:
            return

        store.add_business(
            Business(
                id="b1",
                name="Bright Smile Dental",
                category=BusinessCategory.clinic,
                address="12 Main Street",
            )
        )
        for service in (
            Service(id="s1", business_id="b1", name="Cleaning", duration_minutes=60, price=120.0, category="preventive"),
            Service(id="s2", business_id="b1", name="Checkup", duration_minutes=30, price=80.0, category="preventive"),
            Service(id="s3", business_id="b1", name="Filling", duration_minutes=45, price=150.0, category="restorative"),
            Service(id="s4", business_id="b1", name="Teeth Whitening", duration_minutes=90, price=350.0, category="cosmetic"),
            Service(id="s5", business_id="b1", name="Panoramic X-Ray", duration_minutes=20, price=60.0, category="imaging", is_active=False),
        ):
            store.add_service(service)
        for member in (
            StaffMember(id="st1", business_id="b1", name="Dr. Johnson", specialties=("preventive", "cosmetic")),
            StaffMember(id="st2", business_id="b1", name="Dr. Smith", specialties=("restorative", "preventive")),
            StaffMember(id="st3", business_id="b1", name="Dr. Adams", specialties=("imaging",), is_active=False),
        ):
            store.add_staff(member)

        seed_business_catalog(
            store,
            Business(id="b2", name="Luxe Hair Studio", category=BusinessCategory.salon, address="48 Oak Avenue"),
        )
        seed_business_catalog(
            store,
            Business(id="b3", name="Serenity Spa", category=BusinessCategory.spa),
        )
    logger.info("Demo data seeded")
