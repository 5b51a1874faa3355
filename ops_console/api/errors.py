"""Map domain failures to HTTP responses"""

import logging
from fastapi import HTTPException

from ops_console.domain.exceptions import (
    ConnectivityError,
    ConstraintError,
    DomainException,
    RecordNotFound,
    RosterLocked,
    UnknownProfile,
    ValidationError,
)


def to_http_exception(exc: DomainException, request_id: str) -> HTTPException:
    if isinstance(exc, RosterLocked):
        return HTTPException(
            status_code=409,
            detail={
                "error": "roster_locked",
                "message": str(exc),
                "approved_count": exc.approved_count,
                "is_locked": exc.is_locked,
            },
        )
    if isinstance(exc, RecordNotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (ValidationError, UnknownProfile)):
        logging.warning(f"Rejected input: {exc}", extra={"request_id": request_id})
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, ConstraintError):
        logging.warning(f"Store constraint: {exc}", extra={"request_id": request_id})
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, ConnectivityError):
        logging.error(f"Store unavailable: {exc}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Data store unavailable")

    logging.error(f"Unexpected domain error: {exc}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")
