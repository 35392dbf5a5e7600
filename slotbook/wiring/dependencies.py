from functools import lru_cache
import logging

from slotbook.core.config import settings
from slotbook.application.ports.booking_store import BookingStorePort
from slotbook.application.use_cases.availability import AvailabilityUseCase
from slotbook.application.use_cases.booking_wizard import BookingWizard
from slotbook.application.use_cases.catalog import CatalogUseCase
from slotbook.application.use_cases.reservation import ReservationUseCase
from slotbook.application.utils.time_parser import parse_hours_spec
from slotbook.domain.entities.business_hours import BusinessHours
from slotbook.infrastructure.gateway.http_gateway import HttpBookingGateway
from slotbook.infrastructure.gateway.local_gateway import LocalBookingGateway
from slotbook.infrastructure.store.json_store import JsonBookingStore
from slotbook.infrastructure.store.memory_store import MemoryBookingStore
from slotbook.infrastructure.store.seed import seed_demo_data


logger = logging.getLogger(__name__)


@lru_cache
def get_booking_store() -> BookingStorePort:
    if settings.STORE_PROVIDER.lower() == "json":
        store: BookingStorePort = JsonBookingStore(data_dir=settings.DATA_DIR)
    else:
        store = MemoryBookingStore()
    logger.info("Booking store ready", extra={"reason": settings.STORE_PROVIDER})

    if settings.SEED_DEMO_DATA:
        seed_demo_data(store)
    return store


def get_default_business_hours() -> BusinessHours:
    return BusinessHours.uniform(
        parse_hours_spec(settings.BUSINESS_HOURS),
        closed_weekdays=tuple(settings.CLOSED_WEEKDAYS),
    )


def get_catalog_use_case() -> CatalogUseCase:
    return CatalogUseCase(store=get_booking_store())


@lru_cache
def get_availability_use_case() -> AvailabilityUseCase:
    return AvailabilityUseCase(
        store=get_booking_store(),
        default_hours=get_default_business_hours(),
        interval_minutes=settings.SLOT_INTERVAL_MINUTES,
    )


def get_reservation_use_case() -> ReservationUseCase:
    return ReservationUseCase(store=get_booking_store(), hours_for=get_availability_use_case().hours_for)


def get_booking_gateway() -> LocalBookingGateway | HttpBookingGateway:
    if settings.BOOKING_API_BASE_URL.strip():
        logger.info("Using remote booking API", extra={"reason": settings.BOOKING_API_BASE_URL})
        return HttpBookingGateway(
            base_url=settings.BOOKING_API_BASE_URL,
            timeout=max(settings.CATALOG_TIMEOUT_SECONDS, settings.SUBMIT_TIMEOUT_SECONDS),
        )
    return LocalBookingGateway(
        catalog=get_catalog_use_case(),
        availability=get_availability_use_case(),
        reservations=get_reservation_use_case(),
    )


def make_booking_wizard() -> BookingWizard:
    gateway = get_booking_gateway()
    return BookingWizard(
        catalog=gateway,
        reservations=gateway,
        load_timeout=settings.CATALOG_TIMEOUT_SECONDS,
        submit_timeout=settings.SUBMIT_TIMEOUT_SECONDS,
    )
