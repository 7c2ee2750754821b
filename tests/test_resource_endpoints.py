from __future__ import annotations

from pathlib import Path

import pytest

from conftest import SEED_DOCUMENT, read_disk


def test_books_scenario(client, db_file: Path):
    r = client.patch("/books/1", json={"title": "B"})
    assert r.status_code == 200
    assert r.json() == {"id": "1", "title": "B", "author": "Ann"}
    assert read_disk(db_file)["books"][0] == {"id": "1", "title": "B", "author": "Ann"}

    r = client.patch("/books/1", json={})
    assert r.status_code == 400
    assert r.json() == {"error": "bad request"}
    assert client.get("/books/1").json()["title"] == "B"

    r = client.get("/books/9")
    assert r.status_code == 404
    assert r.json() == {"error": "resource not found"}

    r = client.delete("/books/1")
    assert r.status_code == 200
    assert r.content == b""

    r = client.get("/books/1")
    assert r.status_code == 404


def test_list_and_singleton(client):
    r = client.get("/books")
    assert r.status_code == 200
    assert r.json() == SEED_DOCUMENT["books"]

    r = client.get("/profile")
    assert r.status_code == 200
    assert r.json() == {"name": "typicode"}

    assert client.get("/missing").status_code == 404
    assert client.get("/profile/1").status_code == 404


def test_create(client, db_file: Path):
    r = client.post("/users", json={"name": "bob"})
    assert r.status_code == 201
    created = r.json()
    assert created["name"] == "bob"
    assert isinstance(created["id"], str)
    assert read_disk(db_file)["users"][-1] == created

    r = client.post("/users", json={"id": "u1", "name": "clash"})
    assert r.status_code == 201
    assert r.json()["id"] != "u1"


@pytest.mark.parametrize("content", [b"", b"{broken", b"[1, 2]", b'"text"', b"{}"])
def test_create_rejects_bad_payloads(client, content):
    r = client.post("/users", content=content, headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"error": "bad request"}


def test_create_unknown_or_singleton_key(client):
    assert client.post("/missing", json={"a": 1}).status_code == 404
    assert client.post("/profile", json={"a": 1}).status_code == 404


def test_replace_discards_body_id(client):
    r = client.put("/books/2", json={"id": "2020", "title": "Replaced"})
    assert r.status_code == 200
    assert r.json() == {"id": "2", "title": "Replaced"}
    assert client.get("/books/2").json() == {"id": "2", "title": "Replaced"}
    assert client.get("/books/2020").status_code == 404

    assert client.put("/books/9", json={"title": "x"}).status_code == 404
    assert client.put("/books/2", json={}).status_code == 400


@pytest.mark.parametrize(
    "body",
    [
        {"id": "1", "field_1": "updated-field_1"},
        {"id": "2020", "field_2": "updated-field_2"},
        {"field_1": "updated-field_1"},
    ],
)
def test_patch_variants_keep_id(client, body):
    r = client.patch("/books/1", json=body)
    assert r.status_code == 200
    got = r.json()
    assert got["id"] == "1"
    for k, v in body.items():
        if k != "id":
            assert got[k] == v
    assert got["title"] == "A"


def test_patch_only_id_is_bad_request(client, db_file: Path):
    before = read_disk(db_file)
    r = client.patch("/books/1", json={"id": "1"})
    assert r.status_code == 400
    assert r.json() == {"error": "bad request"}
    assert read_disk(db_file) == before


def test_delete_unknown(client):
    assert client.delete("/books/9").status_code == 404
    assert client.delete("/missing/1").status_code == 404


def test_whole_document_and_home(client):
    r = client.get("/db")
    assert r.status_code == 200
    assert r.json() == SEED_DOCUMENT

    r = client.get("/")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    assert 'href="/books"' in r.text
    assert 'href="/profile"' in r.text


def test_persistence_failure_is_server_error(client, monkeypatch: pytest.MonkeyPatch):
    import persistence.store as store_module

    def _boom(path, payload, **kwargs):
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(store_module, "atomic_write_json", _boom)

    r = client.post("/users", json={"name": "bob"})
    assert r.status_code == 500
    assert r.json() == {"error": "failed to persist changes"}


@pytest.mark.parametrize("content", [b'{"x": 1e999}', b'{"x": -1e999}', b'{"x": NaN}', b'{"x": [Infinity]}'])
def test_non_finite_numbers_are_bad_requests(client, db_file: Path, content):
    before = read_disk(db_file)
    headers = {"content-type": "application/json"}

    for r in (
        client.post("/users", content=content, headers=headers),
        client.patch("/users/u1", content=content, headers=headers),
        client.put("/users/u1", content=content, headers=headers),
    ):
        assert r.status_code == 400
        assert r.json() == {"error": "bad request"}

    assert read_disk(db_file) == before
    r = client.get("/users")
    assert r.status_code == 200
    assert r.json() == SEED_DOCUMENT["users"]


def test_home_page_quotes_keys_in_links(tmp_path: Path):
    import json

    from fastapi.testclient import TestClient

    import app as app_module
    from persistence import DiskResourceStore

    path = tmp_path / "db.json"
    path.write_text(json.dumps({"odd key?#": [], "plain": []}), encoding="utf-8")
    client = TestClient(app_module.create_app(store=DiskResourceStore.open(path)))

    r = client.get("/")
    assert r.status_code == 200
    assert 'href="/odd%20key%3F%23"' in r.text
    assert 'href="/plain"' in r.text
