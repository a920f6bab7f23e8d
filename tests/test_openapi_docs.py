from fastapi.testclient import TestClient
from menu_guard.main import app


client = TestClient(app)


def test_openapi_docs_contains_engine_routes():
    response = client.get("/openapi.json")
    assert response.status_code == 200
    data = response.json()

    paths = data.get("paths", {})
    assert "post" in paths["/api/check/dish"]
    assert "post" in paths["/api/resolve"]
    assert "get" in paths["/api/assignments/{assignment_id}/report"]
