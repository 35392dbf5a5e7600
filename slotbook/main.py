from fastapi import FastAPI

from slotbook.api.v1.appointments import router as appointments_router
from slotbook.api.v1.businesses import router as businesses_router
from slotbook.core.config import settings
from slotbook.core.logging_config import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Slotbook Booking API", version="1.0.0")

app.include_router(businesses_router, prefix="/api/v1", tags=["catalog"])
app.include_router(appointments_router, prefix="/api/v1", tags=["appointments"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
