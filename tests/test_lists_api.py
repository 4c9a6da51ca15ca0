"""HTTP tests for the /api/v1/lists endpoints against a temporary SQLite database."""

import pytest
from fastapi.testclient import TestClient

from list_manager_api.app.core.db import get_connection
from list_manager_api.app.core.i18n import Localizer
from list_manager_api.app.main import create_app
from tests.conftest import add_subscriber


LISTS = "/api/v1/lists/"


def create(client, name, **fields):
    resp = client.post(LISTS, json={"name": name, **fields})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


# ---------------------------------------------------------------------------
# Retrieval
# ---------------------------------------------------------------------------

def test_minimal_listing_of_three_lists(client):
    for name in ("Alpha", "Beta", "Gamma"):
        create(client, name)

    resp = client.get(LISTS, params={"minimal": "true"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data["results"]) == 3
    assert data["total"] == 3
    assert data["per_page"] == 3
    assert data["page"] == 1


def test_minimal_listing_ignores_paging_params(client):
    for name in ("Alpha", "Beta", "Gamma"):
        create(client, name)

    resp = client.get(LISTS, params={"minimal": "1", "page": "4", "per_page": "1"})

    data = resp.json()["data"]
    assert data["page"] == 1
    assert data["per_page"] == 3
    assert data["total"] == 3


def test_empty_listing_returns_empty_data(client):
    assert client.get(LISTS).json() == {"data": []}
    assert client.get(LISTS, params={"minimal": "true"}).json() == {"data": []}


def test_single_list_not_found_is_400(client):
    resp = client.get(f"{LISTS}42")

    assert resp.status_code == 400
    assert resp.json() == {"message": "List not found"}


def test_single_list_ignores_listing_params(client):
    created = create(client, "Only", tags=["news"])

    resp = client.get(
        f"{LISTS}{created['id']}",
        params={"page": "2", "per_page": "1", "query": "nomatch", "tag": "other"},
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Only"


def test_non_numeric_id_falls_back_to_listing(client):
    create(client, "Only")

    data = client.get(f"{LISTS}abc").json()["data"]

    assert data["total"] == 1
    assert data["results"][0]["name"] == "Only"


def test_single_list_with_subscriber_counts(client, db_path):
    created = create(client, "Newsletter")
    add_subscriber(db_path, "a@example.com", created["id"], "confirmed")
    add_subscriber(db_path, "b@example.com", created["id"], "unconfirmed")
    add_subscriber(db_path, "c@example.com", created["id"], "unsubscribed")

    resp = client.get(f"{LISTS}{created['id']}")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["id"] == created["id"]
    assert data["name"] == "Newsletter"
    assert data["subscriber_count"] == 3
    assert data["tags"] == []
    assert "subscriber_counts" not in data


def test_full_listing_pagination(client):
    for i in range(5):
        create(client, f"List {i}")

    resp = client.get(LISTS, params={"page": "2", "per_page": "2", "order_by": "name", "order": "asc"})

    data = resp.json()["data"]
    assert [r["name"] for r in data["results"]] == ["List 2", "List 3"]
    assert data["total"] == 5
    assert data["per_page"] == 2
    assert data["page"] == 2


def test_full_listing_per_page_all(client):
    for i in range(3):
        create(client, f"List {i}")

    data = client.get(LISTS, params={"per_page": "all"}).json()["data"]

    assert len(data["results"]) == 3
    assert data["per_page"] == 3
    assert data["total"] == 3


def test_full_listing_sorts_by_subscriber_count(client, db_path):
    small = create(client, "Small")
    big = create(client, "Big")
    create(client, "Nobody")
    add_subscriber(db_path, "a@example.com", big["id"])
    add_subscriber(db_path, "b@example.com", big["id"], "unconfirmed")
    add_subscriber(db_path, "c@example.com", small["id"])

    data = client.get(LISTS, params={"order_by": "subscriber_count", "order": "desc"}).json()["data"]

    assert [r["name"] for r in data["results"]] == ["Big", "Small", "Nobody"]
    assert [r["subscriber_count"] for r in data["results"]] == [2, 1, 0]


def test_full_listing_ignores_malicious_sort_field(client):
    create(client, "Alpha")

    resp = client.get(LISTS, params={"order_by": "name; DROP TABLE lists; --"})

    assert resp.status_code == 200
    assert resp.json()["data"]["total"] == 1
    assert client.get(LISTS).json()["data"]["total"] == 1


def test_full_listing_search_and_tag_filter(client):
    create(client, "Weekly digest", tags=["news", "weekly"])
    create(client, "Monthly digest", tags=["news"])
    create(client, "Beta testers")

    by_query = client.get(LISTS, params={"query": "  digest "}).json()["data"]
    assert by_query["total"] == 2

    by_tags = client.get(LISTS, params=[("tag", "news"), ("tag", "weekly")]).json()["data"]
    assert [r["name"] for r in by_tags["results"]] == ["Weekly digest"]

    nothing = client.get(LISTS, params={"query": "%"}).json()
    assert nothing == {"data": []}


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------

def test_create_list(client):
    data = create(client, "Weekly", type="public", optin="double", tags=["news", " news ", ""], description="Digest")

    assert data["id"] > 0
    assert data["uuid"]
    assert data["type"] == "public"
    assert data["optin"] == "double"
    assert data["tags"] == ["news"]
    assert data["description"] == "Digest"
    assert data["subscriber_count"] == 0


def test_create_with_empty_name_is_rejected(client):
    resp = client.post(LISTS, json={"name": ""})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid name"}
    assert client.get(LISTS).json() == {"data": []}


def test_create_without_name_is_rejected(client):
    resp = client.post(LISTS, json={"type": "public"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid name"}


def test_create_with_too_long_name_is_rejected(client):
    resp = client.post(LISTS, json={"name": "x" * 2001})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid name"}


def test_create_with_unknown_type_fails_validation(client):
    resp = client.post(LISTS, json={"name": "Weekly", "type": "secret"})
    assert resp.status_code == 422


def test_update_list(client):
    created = create(client, "Weekly", tags=["news"])

    resp = client.put(f"{LISTS}{created['id']}", json={"name": "Weekly digest", "type": "public"})

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["name"] == "Weekly digest"
    assert data["type"] == "public"
    assert data["tags"] == []


def test_update_with_invalid_id(client):
    resp = client.put(f"{LISTS}0", json={"name": "Weekly"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid ID"}


def test_update_missing_list(client):
    resp = client.put(f"{LISTS}999", json={"name": "Weekly"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "List not found"}


@pytest.mark.parametrize("list_id", ["0", "abc"])
def test_update_checks_id_before_body(client, list_id):
    resp = client.put(f"{LISTS}{list_id}", json={"name": "Weekly", "type": "bogus"})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid ID"}


def test_update_with_invalid_body_fails_validation(client):
    created = create(client, "Weekly")

    assert client.put(f"{LISTS}{created['id']}", json={"name": "Weekly", "type": "bogus"}).status_code == 422
    assert client.put(f"{LISTS}{created['id']}", json=["Weekly"]).status_code == 422


def test_update_with_empty_name(client):
    created = create(client, "Weekly")

    resp = client.put(f"{LISTS}{created['id']}", json={"name": ""})

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid name"}


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def test_delete_list(client, db_path):
    created = create(client, "Weekly")
    add_subscriber(db_path, "a@example.com", created["id"])

    resp = client.delete(f"{LISTS}{created['id']}")

    assert resp.status_code == 200
    assert resp.json() == {"data": True}
    assert client.get(f"{LISTS}{created['id']}").status_code == 400

    conn = get_connection(db_path)
    try:
        left = conn.execute("SELECT COUNT(*) AS n FROM subscriber_lists").fetchone()["n"]
    finally:
        conn.close()
    assert left == 0


@pytest.mark.parametrize("list_id", ["0", "-2", "abc"])
def test_delete_with_invalid_id(client, list_id):
    resp = client.delete(f"{LISTS}{list_id}")

    assert resp.status_code == 400
    assert resp.json() == {"message": "Invalid ID"}


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------

def test_messages_are_localized(store):
    app = create_app(store=store, i18n=Localizer("ru"))
    with TestClient(app) as client:
        resp = client.get(f"{LISTS}42")

    assert resp.status_code == 400
    assert resp.json() == {"message": "Список не найден"}


def test_health(client):
    resp = client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
