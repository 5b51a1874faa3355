"""Persistence collaborator contract shared by every store backend"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ops_console.domain.exceptions import ValidationError

# Entity name -> table name in the remote store
ENTITIES = {
    "profile": "profiles",
    "bank_account": "bank_accounts",
    "bank_transaction": "bank_transactions",
    "working_hour": "working_hours",
    "roster": "rosters",
    "payroll": "payroll",
}


@dataclass(frozen=True)
class RecordFilter:
    """Equality and inclusive range conditions, ANDed together"""

    eq: Dict[str, Any] = field(default_factory=dict)
    gte: Dict[str, Any] = field(default_factory=dict)
    lte: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Order:
    field: str
    descending: bool = False


def table_for(entity: str) -> str:
    try:
        return ENTITIES[entity]
    except KeyError:
        raise ValidationError(f"Unknown entity type {entity!r}") from None


class RecordStore(ABC):
    """
    Generic row store: create/read/update/delete plus filtered reads.

    Rows travel as plain dicts keyed by column name. Implementations raise
    ConnectivityError for transient failures and ConstraintError for
    rejected writes; nothing else escapes except RecordNotFound.
    """

    @abstractmethod
    def fetch_many(
        self,
        entity: str,
        record_filter: Optional[RecordFilter] = None,
        order: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def insert(self, entity: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Assigns id, created_at and updated_at"""

    def insert_many(self, entity: str, records: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self.insert(entity, record) for record in records]

    @abstractmethod
    def update(self, entity: str, record_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    def delete(self, entity: str, record_id: str) -> None:
        ...

    def fetch_one(self, entity: str, record_id: str) -> Optional[Dict[str, Any]]:
        rows = self.fetch_many(entity, RecordFilter(eq={"id": record_id}), limit=1)
        return rows[0] if rows else None
