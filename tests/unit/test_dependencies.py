"""Unit tests for the store dependency"""

from ops_console.api import dependencies
from ops_console.infrastructure.store.rest import RestRecordStore
from ops_console.infrastructure.store.sql import SqlRecordStore


class FakeSession:
    closed = False

    def close(self):
        self.closed = True


def test_rest_backend_opens_no_sql_session(monkeypatch):
    def fail_session():
        raise AssertionError("SQL session opened for the rest backend")

    monkeypatch.setattr(dependencies.settings, "store_backend", "rest")
    monkeypatch.setattr(dependencies.session, "SessionLocal", fail_session)

    store = next(dependencies.get_store())

    assert isinstance(store, RestRecordStore)


def test_sql_backend_closes_session(monkeypatch):
    fake = FakeSession()
    monkeypatch.setattr(dependencies.settings, "store_backend", "sql")
    monkeypatch.setattr(dependencies.session, "SessionLocal", lambda: fake)

    stores = dependencies.get_store()
    store = next(stores)
    stores.close()

    assert isinstance(store, SqlRecordStore)
    assert store.db is fake
    assert fake.closed
