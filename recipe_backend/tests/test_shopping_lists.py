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


def _create(c: TestClient, name: str = "Weekly shop", items: list | None = None) -> dict:
    resp = c.post("/shopping-lists", json={"name": name, "items": items or []})
    assert resp.status_code == 200
    return resp.json()


def test_create_and_list():
    c = _client_for("list_create")
    created = _create(c, items=[{"ingredient": "milk", "amount": "1 l"}])
    assert created["name"] == "Weekly shop"
    assert created["items"] == [{"ingredient": "milk", "amount": "1 l", "checked": False}]
    assert created["created_at"]
    lists = c.get("/shopping-lists").json()
    assert [sl["id"] for sl in lists] == [created["id"]]


def test_default_name():
    c = _client_for("list_default")
    resp = c.post("/shopping-lists", json={})
    assert resp.status_code == 200
    assert resp.json()["name"] == "New Shopping List"


def test_lists_are_private():
    owner = _client_for("list_owner")
    other = _client_for("list_other")
    _create(owner)
    assert other.get("/shopping-lists").json() == []


def test_replace_items():
    c = _client_for("list_replace")
    created = _create(c, items=[{"ingredient": "milk"}, {"ingredient": "eggs"}])
    resp = c.put(f"/shopping-lists/{created['id']}", json={
        "items": [{"ingredient": "eggs", "amount": "12", "checked": True}],
    })
    assert resp.status_code == 200
    assert resp.json()["status"] == "updated"
    lists = c.get("/shopping-lists").json()
    assert lists[0]["items"] == [{"ingredient": "eggs", "amount": "12", "checked": True}]


def test_replace_items_on_missing_list_is_noop():
    c = _client_for("list_replace_missing")
    resp = c.put("/shopping-lists/9999", json={"items": [{"ingredient": "eggs"}]})
    assert resp.status_code == 200
    assert c.get("/shopping-lists").json() == []


def test_replace_items_rejects_malformed_items():
    c = _client_for("list_replace_bad")
    created = _create(c)
    resp = c.put(f"/shopping-lists/{created['id']}", json={"items": [{"checked": True}]})
    assert resp.status_code == 422


def test_delete():
    c = _client_for("list_delete")
    created = _create(c)
    resp = c.delete(f"/shopping-lists/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["status"] == "deleted"
    assert c.get("/shopping-lists").json() == []


def test_delete_missing_list_succeeds():
    c = _client_for("list_delete_missing")
    _create(c)
    resp = c.delete("/shopping-lists/9999")
    assert resp.status_code == 200
    assert len(c.get("/shopping-lists").json()) == 1


def test_other_users_cannot_touch_a_list():
    owner = _client_for("list_guarded")
    intruder = _client_for("list_intruder")
    created = _create(owner, items=[{"ingredient": "flour"}])
    assert intruder.put(f"/shopping-lists/{created['id']}", json={"items": []}).status_code == 403
    assert intruder.delete(f"/shopping-lists/{created['id']}").status_code == 403
    assert owner.get("/shopping-lists").json()[0]["items"][0]["ingredient"] == "flour"


# ── Missing ingredients ──────────────────────────────────────────────────


def test_list_from_recipe_holds_missing_ingredients():
    c = _client_for("list_from_recipe")
    resp = c.post("/shopping-lists/from-recipe", json={
        "recipe_id": 2,
        "ingredients": ["chicken", "garlic", "soy sauce"],
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Shopping list for Asian Chicken Stir Fry"
    assert [i["ingredient"] for i in body["items"]] == [
        "bell peppers", "broccoli", "ginger", "vegetable oil", "green onions",
    ]
    assert [i["amount"] for i in body["items"]][:2] == ["2, sliced", "1 cup florets"]


def test_list_from_unknown_recipe_is_404():
    c = _client_for("list_from_unknown")
    resp = c.post("/shopping-lists/from-recipe", json={"recipe_id": 777, "ingredients": []})
    assert resp.status_code == 404
    assert c.get("/shopping-lists").json() == []
