"""RecordStore over a PostgREST-style HTTP endpoint"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx
from pydantic_core import to_jsonable_python

from ops_console.config import settings
from ops_console.domain.exceptions import (
    ConnectivityError,
    ConstraintError,
    RecordNotFound,
)
from ops_console.infrastructure.observability.logging import log_store_failure
from ops_console.infrastructure.observability.metrics import store_failure_counter, store_latency_histogram
from ops_console.infrastructure.store.base import Order, RecordFilter, RecordStore, table_for

logger = logging.getLogger(__name__)

# 4xx codes that mean the store refused the data, not that it is unreachable
CONSTRAINT_STATUSES = (400, 404, 406, 409, 422)


def encode_value(value: Any) -> str:
    jsonable = to_jsonable_python(value)
    if isinstance(jsonable, bool):
        return "true" if jsonable else "false"
    if jsonable is None:
        return "null"
    return str(jsonable)


def build_query_params(
    record_filter: Optional[RecordFilter],
    order: Sequence[Order] = (),
    limit: Optional[int] = None,
) -> List[Tuple[str, str]]:
    """Translate a RecordFilter into PostgREST operators (eq./gte./lte./is.)"""
    params: List[Tuple[str, str]] = [("select", "*")]
    if record_filter is not None:
        for name, value in record_filter.eq.items():
            op = "is" if value is None else "eq"
            params.append((name, f"{op}.{encode_value(value)}"))
        for name, value in record_filter.gte.items():
            params.append((name, f"gte.{encode_value(value)}"))
        for name, value in record_filter.lte.items():
            params.append((name, f"lte.{encode_value(value)}"))
    if order:
        params.append(
            ("order", ",".join(f"{o.field}.{'desc' if o.descending else 'asc'}" for o in order))
        )
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


class RestRecordStore(RecordStore):
    """Client for the remote relational store's REST interface"""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.store_api_base).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.store_api_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.store_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.store_backoff_base
        self.transport = transport

    def _client(self) -> httpx.Client:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    def _send(self, entity: str, method: str, params=None, json=None, prefer: str | None = None):
        """
        Perform one HTTP call and return the decoded JSON body.

        Raises:
            ConnectivityError: timeout, network failure or 5xx
            ConstraintError: store rejected the request
        """
        table = table_for(entity)
        headers = {"Prefer": prefer} if prefer else None

        with self._client() as client:
            try:
                with store_latency_histogram.labels(method=method).time():
                    response = client.request(
                        method, f"/{table}", params=params, json=json, headers=headers
                    )
                response.raise_for_status()
            except httpx.TimeoutException as e:
                store_failure_counter.labels(kind="connectivity").inc()
                raise ConnectivityError(f"Store timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status in CONSTRAINT_STATUSES:
                    store_failure_counter.labels(kind="constraint").inc()
                    log_store_failure(entity, method, "constraint", e)
                    raise ConstraintError(f"{table}: {status} {e.response.text}") from e
                store_failure_counter.labels(kind="connectivity").inc()
                raise ConnectivityError(f"Store error: {status}") from e
            except httpx.RequestError as e:
                store_failure_counter.labels(kind="connectivity").inc()
                raise ConnectivityError(f"Store unreachable: {e}") from e

        if not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise ConnectivityError(f"Invalid response from store: {e}") from e

    def fetch_many(
        self,
        entity: str,
        record_filter: Optional[RecordFilter] = None,
        order: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Read rows, retrying transient failures.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base, ...
        - Only ConnectivityError is retried; reads are idempotent
        """
        params = build_query_params(record_filter, order, limit)
        attempt = 0
        while True:
            try:
                return self._send(entity, "GET", params=params)
            except ConnectivityError as e:
                attempt += 1
                if attempt >= self.max_retries:
                    logger.error(
                        "Store read failed",
                        extra={"entity": entity, "attempts": attempt, "error": str(e)},
                    )
                    raise
                backoff = self.backoff_base * (2 ** (attempt - 1))
                log_store_failure(entity, "fetch_many", "connectivity", e, attempt=attempt)
                logger.info("Retrying store read", extra={"entity": entity, "backoff_seconds": backoff})
                time.sleep(backoff)

    def insert(self, entity: str, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.insert_many(entity, [record])[0]

    def insert_many(self, entity: str, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Single bulk POST; the store applies it atomically"""
        rows = self._send(
            entity,
            "POST",
            json=to_jsonable_python(list(records)),
            prefer="return=representation",
        )
        if len(rows) != len(records):
            raise ConstraintError(f"{entity}: store returned {len(rows)} of {len(records)} rows")
        return rows

    def update(self, entity: str, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._send(
            entity,
            "PATCH",
            params=[("id", f"eq.{record_id}")],
            json=to_jsonable_python(patch),
            prefer="return=representation",
        )
        if not rows:
            raise RecordNotFound(entity, record_id)
        return rows[0]

    def delete(self, entity: str, record_id: str) -> None:
        rows = self._send(
            entity,
            "DELETE",
            params=[("id", f"eq.{record_id}")],
            prefer="return=representation",
        )
        if not rows:
            raise RecordNotFound(entity, record_id)
