"""Dependency injection for FastAPI endpoints"""

from typing import Iterator

from fastapi import Request

from ops_console.config import settings
from ops_console.domain.payroll import DeductionPolicy
from ops_console.infrastructure.database import session
from ops_console.infrastructure.store.base import RecordStore
from ops_console.infrastructure.store.rest import RestRecordStore
from ops_console.infrastructure.store.sql import SqlRecordStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store() -> Iterator[RecordStore]:
    """Provide the configured persistence collaborator; a SQL session is opened only for the sql backend"""
    if settings.store_backend == "rest":
        yield RestRecordStore()
        return

    db = session.SessionLocal()
    try:
        yield SqlRecordStore(db)
    finally:
        db.close()


def get_deduction_policy() -> DeductionPolicy:
    """Deduction policy from settings, used when a request gives no explicit amount"""
    return DeductionPolicy(
        mode=settings.payroll_deduction_mode,
        value=settings.payroll_deduction_value,
    )
