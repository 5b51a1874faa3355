"""RecordStore backed by a SQLAlchemy session"""

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ops_console.domain.exceptions import (
    ConnectivityError,
    ConstraintError,
    RecordNotFound,
    ValidationError,
)
from ops_console.infrastructure.database.models import TABLES
from ops_console.infrastructure.observability.logging import log_store_failure
from ops_console.infrastructure.observability.metrics import store_failure_counter
from ops_console.infrastructure.store.base import Order, RecordFilter, RecordStore, table_for


def row_to_dict(row) -> Dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class SqlRecordStore(RecordStore):
    """Each call is its own transaction: committed on success, rolled back on failure"""

    def __init__(self, db: Session):
        self.db = db

    def _model(self, entity: str):
        return TABLES[table_for(entity)]

    def _column(self, model, name: str):
        if name not in model.__table__.columns:
            raise ValidationError(f"{model.__tablename__} has no column {name!r}")
        return getattr(model, name)

    def _fail(self, entity: str, operation: str, exc: Exception) -> None:
        self.db.rollback()
        if isinstance(exc, IntegrityError):
            store_failure_counter.labels(kind="constraint").inc()
            log_store_failure(entity, operation, "constraint", exc.orig)
            raise ConstraintError(f"{entity}: {exc.orig}") from exc
        store_failure_counter.labels(kind="connectivity").inc()
        log_store_failure(entity, operation, "connectivity", exc)
        raise ConnectivityError(f"{entity}: database unavailable") from exc

    def fetch_many(
        self,
        entity: str,
        record_filter: Optional[RecordFilter] = None,
        order: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        model = self._model(entity)
        record_filter = record_filter or RecordFilter()

        query = self.db.query(model)
        for name, value in record_filter.eq.items():
            query = query.filter(self._column(model, name) == value)
        for name, value in record_filter.gte.items():
            query = query.filter(self._column(model, name) >= value)
        for name, value in record_filter.lte.items():
            query = query.filter(self._column(model, name) <= value)
        for o in order:
            column = self._column(model, o.field)
            query = query.order_by(column.desc() if o.descending else column.asc())
        if limit is not None:
            query = query.limit(limit)

        try:
            return [row_to_dict(row) for row in query.all()]
        except (OperationalError, DBAPIError) as e:
            self._fail(entity, "fetch_many", e)

    def insert(self, entity: str, record: Dict[str, Any]) -> Dict[str, Any]:
        return self.insert_many(entity, [record])[0]

    def insert_many(self, entity: str, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """All rows or none"""
        model = self._model(entity)
        for record in records:
            for name in record:
                self._column(model, name)

        rows = [model(**record) for record in records]
        try:
            self.db.add_all(rows)
            self.db.commit()
        except (IntegrityError, OperationalError, DBAPIError) as e:
            self._fail(entity, "insert", e)

        for row in rows:
            self.db.refresh(row)
        return [row_to_dict(row) for row in rows]

    def update(self, entity: str, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(entity)
        for name in patch:
            if name == "id":
                raise ValidationError("id cannot be changed")
            self._column(model, name)

        row = self.db.get(model, record_id)
        if row is None:
            raise RecordNotFound(entity, record_id)

        for name, value in patch.items():
            setattr(row, name, value)
        try:
            self.db.commit()
        except (IntegrityError, OperationalError, DBAPIError) as e:
            self._fail(entity, "update", e)

        self.db.refresh(row)
        return row_to_dict(row)

    def delete(self, entity: str, record_id: str) -> None:
        model = self._model(entity)
        row = self.db.get(model, record_id)
        if row is None:
            raise RecordNotFound(entity, record_id)

        try:
            self.db.delete(row)
            self.db.commit()
        except (IntegrityError, OperationalError, DBAPIError) as e:
            self._fail(entity, "delete", e)
