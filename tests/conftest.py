from __future__ import annotations

import pytest

from slotbook.application.use_cases.availability import AvailabilityUseCase
from slotbook.application.use_cases.catalog import CatalogUseCase
from slotbook.application.use_cases.reservation import ReservationUseCase
from slotbook.application.utils.time_parser import parse_hours_spec
from slotbook.domain.entities.business_hours import BusinessHours
from slotbook.infrastructure.gateway.local_gateway import LocalBookingGateway
from slotbook.infrastructure.store.memory_store import MemoryBookingStore
from slotbook.infrastructure.store.seed import seed_demo_data


@pytest.fixture
def store() -> MemoryBookingStore:
    store = MemoryBookingStore()
    seed_demo_data(store)
    return store


@pytest.fixture
def catalog(store) -> CatalogUseCase:
    return CatalogUseCase(store)


@pytest.fixture
def availability(store) -> AvailabilityUseCase:
    return AvailabilityUseCase(
        store,
        default_hours=BusinessHours.uniform(parse_hours_spec("09:00-12:00,13:00-17:00")),
        interval_minutes=30,
    )


@pytest.fixture
def reservations(store, availability) -> ReservationUseCase:
    return ReservationUseCase(store, hours_for=availability.hours_for)


@pytest.fixture
def gateway(catalog, availability, reservations) -> LocalBookingGateway:
    return LocalBookingGateway(catalog=catalog, availability=availability, reservations=reservations)
