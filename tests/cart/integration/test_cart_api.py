"""Integration tests for cart API endpoints."""

import pytest
from academy.api import cart_router, register_error_handlers
from fastapi import FastAPI
from fastapi.testclient import TestClient

USER = {"X-User-Id": "user-001"}


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(cart_router)
    return TestClient(app)


class TestCartEndpoints:
    def test_add_and_list(self, client):
        response = client.post("/cart/items", json={"course_id": "course-python"}, headers=USER)
        assert response.status_code == 201
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["course"]["title"] == "Python Basics"

        response = client.get("/cart", headers=USER)
        assert response.status_code == 200
        assert [i["course_id"] for i in response.json()["items"]] == ["course-python"]

    def test_duplicate_add_is_conflict(self, client):
        client.post("/cart/items", json={"course_id": "course-python"}, headers=USER)
        response = client.post("/cart/items", json={"course_id": "course-python"}, headers=USER)
        assert response.status_code == 409
        assert response.json()["error"]["kind"] == "conflict"

    def test_unknown_course_is_not_found(self, client):
        response = client.post("/cart/items", json={"course_id": "nope"}, headers=USER)
        assert response.status_code == 404
        assert response.json()["error"]["kind"] == "not_found"

    def test_remove(self, client):
        client.post("/cart/items", json={"course_id": "course-python"}, headers=USER)
        response = client.delete("/cart/items/course-python", headers=USER)
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_requires_user(self, client):
        response = client.get("/cart")
        assert response.status_code == 401
