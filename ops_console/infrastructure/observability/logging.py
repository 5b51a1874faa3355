"""JSON logs on stdout, one object per line"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from ops_console.config import settings

# Libraries that log every request or statement at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Adds an aware UTC timestamp, the level name and the service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout as JSON; safe to call more than once"""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def log_store_failure(entity: str, operation: str, kind: str, error: Exception, attempt: int | None = None) -> None:
    """One warning per failed store call; kind is connectivity or constraint"""
    extra = {"entity": entity, "operation": operation, "kind": kind, "error": str(error)}
    if attempt is not None:
        extra["attempt"] = attempt
    logging.getLogger("ops_console.store").warning("Store call failed", extra=extra)


def log_payroll_run(
    request_id: str,
    profile_count: int,
    period_start,
    period_end,
    persisted: bool,
    duration_ms: float,
) -> None:
    """Log one payroll preview or commit"""
    logging.info(
        "Payroll run completed",
        extra={
            "request_id": request_id,
            "step": "payroll_commit" if persisted else "payroll_preview",
            "profile_count": profile_count,
            "period_start": str(period_start),
            "period_end": str(period_end),
            "duration_ms": duration_ms,
        },
    )


def log_roster_edit_rejected(request_id: str, roster_id: str, approved_count: int, is_locked: bool) -> None:
    logging.warning(
        "Roster edit rejected",
        extra={
            "request_id": request_id,
            "roster_id": roster_id,
            "approved_count": approved_count,
            "is_locked": is_locked,
        },
    )
