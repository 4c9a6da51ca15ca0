"""
Pytest configuration and shared fixtures.

HTTP and store tests run against a throwaway SQLite file per test.
Service tests use ``FakeListStore``, which keeps records in memory and
records every call so tests can assert what did (or did not) reach the
store.
"""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from list_manager_api.app.core.db import get_connection, init_db
from list_manager_api.app.core.errors import NotFound
from list_manager_api.app.core.i18n import Localizer
from list_manager_api.app.main import create_app
from list_manager_api.app.services.list_store import ListRecord, SQLiteListStore


class FakeListStore:
    """In-memory ``ListStore`` that records calls."""

    def __init__(self, records: Optional[List[ListRecord]] = None, total: Optional[int] = None):
        self.records = list(records or [])
        self.total = total
        self.calls = []

    def query_lists(self, query="", tags=(), order_by="created_at", order="desc", offset=0, limit=0, list_id=0):
        self.calls.append((
            "query_lists",
            {
                "query": query,
                "tags": list(tags),
                "order_by": order_by,
                "order": order,
                "offset": offset,
                "limit": limit,
                "list_id": list_id,
            },
        ))
        records = [r for r in self.records if not list_id or r.id == list_id]
        if not records:
            return [], 0
        return records, self.total if self.total is not None else len(records)

    def get_lists(self, list_type=""):
        self.calls.append(("get_lists", {"list_type": list_type}))
        return list(self.records)

    def create_list(self, data):
        self.calls.append(("create_list", data))
        record = ListRecord(
            id=len(self.records) + 1,
            uuid=f"uuid-{len(self.records) + 1}",
            name=data.name,
            type=data.type,
            optin=data.optin,
            tags=data.tags,
            description=data.description,
        )
        self.records.append(record)
        return record

    def update_list(self, list_id, data):
        self.calls.append(("update_list", list_id, data))
        for record in self.records:
            if record.id == list_id:
                record.name = data.name
                record.tags = data.tags
                return record
        raise NotFound("List not found")

    def delete_lists(self, ids):
        self.calls.append(("delete_lists", list(ids)))


def make_record(list_id: int, name: str = None, tags=None, counts=None) -> ListRecord:
    return ListRecord(
        id=list_id,
        uuid=f"uuid-{list_id}",
        name=name or f"List {list_id}",
        type="public",
        optin="single",
        tags=tags,
        subscriber_counts=dict(counts or {}),
        created_at="2024-01-01 00:00:00",
        updated_at="2024-01-01 00:00:00",
    )


def add_subscriber(db_path: str, email: str, list_id: int, status: str = "confirmed") -> None:
    """Insert a subscriber (if needed) and subscribe it to ``list_id``."""
    conn = get_connection(db_path)
    try:
        conn.execute("INSERT OR IGNORE INTO subscribers (email) VALUES (?)", (email,))
        sub_id = conn.execute("SELECT id FROM subscribers WHERE email = ?", (email,)).fetchone()["id"]
        conn.execute(
            "INSERT INTO subscriber_lists (subscriber_id, list_id, status) VALUES (?, ?, ?)",
            (sub_id, list_id, status),
        )
        conn.commit()
    finally:
        conn.close()


@pytest.fixture
def i18n():
    return Localizer("en")


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "lists.db")
    init_db(path)
    return path


@pytest.fixture
def store(db_path, i18n):
    return SQLiteListStore(i18n, db_path=db_path)


@pytest.fixture
def app(store, i18n):
    return create_app(store=store, i18n=i18n)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
