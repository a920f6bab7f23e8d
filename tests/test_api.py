import pytest
from fastapi.testclient import TestClient
from menu_guard.main import app, get_catalog, get_registry, get_store


@pytest.fixture
def client(catalog, store, registry):
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_registry] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_root_and_request_id(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "X-Request-ID" in response.headers


def test_check_dish_endpoint(client):
    response = client.post(
        "/api/check/dish",
        json={
            "dish": {
                "id": 1,
                "name": "Dish A",
                "linked_ingredients": [
                    {"id": 1, "name": "wheat", "allergens": []},
                    {"id": 2, "name": "egg", "allergens": ["egg"]}
                ]
            },
            "guest_allergens": ["egg", "shrimp"]
        }
    )
    assert response.status_code == 200
    data = response.json()
    assert data["verdict"] == "NG"
    assert data["matched_allergens"] == ["egg"]

    response = client.post(
        "/api/check/dish",
        json={
            "dish": {
                "id": 1,
                "name": "Dish A",
                "linked_ingredients": [
                    {"id": 1, "name": "wheat", "allergens": []},
                    {"id": 2, "name": "egg", "allergens": ["egg"]}
                ]
            },
            "guest_allergens": ["egg", "shrimp"],
            "excluded_ingredient_ids": [2]
        }
    )
    assert response.json()["verdict"] == "OK"


def test_check_ingredient_endpoint(client):
    response = client.post(
        "/api/check/ingredient",
        json={
            "ingredient": {"id": 7, "name": "soy sauce", "allergens": ["soybean"], "allergen_unknown": True},
            "guest_allergens": ["egg"]
        }
    )
    assert response.status_code == 200
    assert response.json() == {"verdict": "NEEDS_REVIEW", "matched_allergens": []}


def test_resolve_endpoint_replace_fallback(client, recipes):
    response = client.post(
        "/api/resolve",
        json={
            "dish_ids": [1, 2],
            "recipes": [r.model_dump(mode="json") for r in recipes],
            "customizations": [
                {"original_dish_id": 1, "action": {"kind": "replace", "replacement_dish_id": 9999}}
            ]
        }
    )
    assert response.status_code == 200
    data = response.json()
    assert data[0]["recipe"]["id"] == 1
    assert data[0]["is_customized"] is True
    assert data[1]["is_customized"] is False


def test_unknown_action_kind_rejected(client):
    response = client.post(
        "/api/resolve",
        json={"dish_ids": [1], "customizations": [{"original_dish_id": 1, "action": {"kind": "blend"}}]}
    )
    assert response.status_code == 422


def test_assignment_workflow(client):
    response = client.post("/api/assignments", json={"customer_id": 100, "course_id": 10, "date": "2026-02-07"})
    assert response.status_code == 201
    assignment_id = response.json()["id"]
    assert response.json()["status"] == "unconfirmed"

    response = client.put(
        f"/api/assignments/{assignment_id}/customizations",
        json={"original_dish_id": 2, "action": {"kind": "remove"}, "note": "no tempura"}
    )
    assert response.status_code == 200
    response = client.put(
        f"/api/assignments/{assignment_id}/customizations",
        json={"original_dish_id": 1, "excluded_ingredient_ids": [2]}
    )
    assert [c["original_dish_id"] for c in response.json()["customizations"]] == [2, 1]

    report = client.get(f"/api/assignments/{assignment_id}/report").json()
    assert [d["recipe_id"] for d in report["dishes"]] == [3, 1, 4]
    assert report["counts"] == {"ok": 2, "needs_review": 1, "ng": 0}
    assert report["removed_dishes"][0]["dish_name"] == "Tempura"

    # An empty record clears the override for that dish
    response = client.put(f"/api/assignments/{assignment_id}/customizations", json={"original_dish_id": 1})
    assert [c["original_dish_id"] for c in response.json()["customizations"]] == [2]

    response = client.delete(f"/api/assignments/{assignment_id}/customizations/2")
    assert response.json()["customizations"] == []

    assert client.get("/api/kitchen").json() == []
    client.put(f"/api/assignments/{assignment_id}/kitchen-note", json={"kitchen_note": "Late seating"})
    response = client.put(f"/api/assignments/{assignment_id}/status", json={"status": "shared_with_kitchen"})
    assert response.json()["status"] == "shared_with_kitchen"

    sheets = client.get("/api/kitchen", params={"date": "2026-02-07"}).json()
    assert len(sheets) == 1
    assert sheets[0]["kitchen_note"] == "Late seating"

    listed = client.get("/api/assignments", params={"status": "shared_with_kitchen"}).json()
    assert [a["id"] for a in listed] == [assignment_id]

    assert client.delete(f"/api/assignments/{assignment_id}").status_code == 204
    assert client.get(f"/api/assignments/{assignment_id}").status_code == 404


def test_missing_assignment_returns_404(client):
    response = client.get("/api/assignments/999/report")
    assert response.status_code == 404
    assert response.json()["error_code"] == "ASSIGNMENT_NOT_FOUND"


def test_create_assignment_requires_catalog_entities(client):
    response = client.post("/api/assignments", json={"customer_id": 999, "course_id": 10, "date": "2026-02-07"})
    assert response.status_code == 404
    assert response.json()["error_code"] == "CATALOG_ENTITY_NOT_FOUND"
    assert response.json()["entity"] == "Customer"


def test_create_assignment_validates_date(client):
    response = client.post("/api/assignments", json={"customer_id": 100, "course_id": 10, "date": "next friday"})
    assert response.status_code == 422


def test_course_check_endpoint(client):
    response = client.get("/api/courses/10/check", params={"customer_id": 100})
    assert response.status_code == 200
    assert response.json()["counts"] == {"ok": 1, "needs_review": 1, "ng": 2}


def test_allergen_endpoints(client):
    assert len(client.get("/api/allergens").json()) == 28

    response = client.post("/api/allergens/custom", json={"name": "yuzu"})
    assert response.status_code == 201
    assert response.json() == {"name": "yuzu", "category": "custom"}

    response = client.post("/api/allergens/custom", json={"name": "yuzu"})
    assert response.status_code == 409
    assert response.json()["detail"]["error_code"] == "DUPLICATE_ALLERGEN"

    assert client.delete("/api/allergens/custom/yuzu").status_code == 204
    assert client.delete("/api/allergens/custom/yuzu").status_code == 404
