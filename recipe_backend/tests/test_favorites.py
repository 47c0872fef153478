from __future__ import annotations

from fastapi.testclient import TestClient

from recipe_backend.app import create_app

app = create_app()


def _client_for(username: str) -> TestClient:
    c = TestClient(app)
    resp = c.post("/auth/register", json={
        "username": username, "email": f"{username}@example.com", "password": "password",
    })
    assert resp.status_code == 200
    return c


def test_add_and_list_favorites():
    c = _client_for("fav_one")
    resp = c.post("/favorites", json={"recipe_id": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["recipe_id"] == 3
    assert body["user_id"] == c.get("/auth/me").json()["id"]
    favorites = c.get("/favorites").json()
    assert [r["title"] for r in favorites] == ["Fresh Caprese Salad"]


def test_adding_twice_returns_same_record():
    c = _client_for("fav_twice")
    first = c.post("/favorites", json={"recipe_id": 2}).json()
    second = c.post("/favorites", json={"recipe_id": 2}).json()
    assert first == second
    assert len(c.get("/favorites").json()) == 1


def test_favorites_are_private():
    owner = _client_for("fav_owner")
    other = _client_for("fav_other")
    owner.post("/favorites", json={"recipe_id": 1})
    assert other.get("/favorites").json() == []


def test_remove_favorite():
    c = _client_for("fav_remove")
    c.post("/favorites", json={"recipe_id": 5})
    resp = c.delete("/favorites/5")
    assert resp.status_code == 200
    assert resp.json()["status"] == "removed"
    assert c.get("/favorites").json() == []


def test_remove_absent_favorite_is_not_an_error():
    c = _client_for("fav_absent")
    resp = c.delete("/favorites/7")
    assert resp.status_code == 200


def test_favorite_unknown_recipe_is_404():
    c = _client_for("fav_unknown")
    resp = c.post("/favorites", json={"recipe_id": 4040})
    assert resp.status_code == 404
    assert c.get("/favorites").json() == []


def test_favorite_rejects_malformed_body():
    c = _client_for("fav_malformed")
    resp = c.post("/favorites", json={"recipe": "soup"})
    assert resp.status_code == 422
