from __future__ import annotations

from fastapi import HTTPException

from slotbook.application.exceptions import (
    BookingError,
    NotFoundError,
    SlotConflictError,
    TransientServiceError,
    ValidationError,
)
from slotbook.api.v1.schemas import ErrorDetailSchema

STATUS_BY_KIND = {
    ValidationError.kind: 422,
    NotFoundError.kind: 404,
    SlotConflictError.kind: 409,
    TransientServiceError.kind: 503,
}


def to_http_exception(error: BookingError) -> HTTPException:
    detail = ErrorDetailSchema(
        kind=error.kind,
        message=error.message,
        fields=list(getattr(error, "fields", ()) or ()),
    )
    return HTTPException(status_code=STATUS_BY_KIND.get(error.kind, 500), detail=detail.model_dump())
