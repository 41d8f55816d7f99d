"""Tests for category API endpoints."""

from fastapi.testclient import TestClient


def create_category(client: TestClient, name: str) -> dict:
    response = client.post("/api/categories", json={"name": name})
    assert response.status_code == 201
    return response.json()["data"]


class TestCategoryReads:
    """Tests for public category endpoints."""

    def test_list_sorted_by_name(self, auth_client: TestClient) -> None:
        for name in ("Sofas", "Chairs", "Desks"):
            create_category(auth_client, name)

        response = auth_client.get("/api/categories", params={"perPage": 2})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["name"] for c in data["items"]] == ["Chairs", "Desks"]
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_next"] is True

    def test_public_read(self, client: TestClient) -> None:
        response = client.get("/api/categories")

        assert response.status_code == 200
        assert response.json()["data"]["items"] == []

    def test_by_slug(self, auth_client: TestClient) -> None:
        created = create_category(auth_client, "Home Office")

        response = auth_client.get("/api/categories/by-slug/home-office")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == created["id"]

    def test_not_found(self, auth_client: TestClient) -> None:
        response = auth_client.get("/api/categories/by-slug/nothing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestCategoryAdmin:
    """Tests for category management endpoints."""

    def test_create(self, auth_client: TestClient) -> None:
        data = create_category(auth_client, "Home Office")

        assert data["slug"] == "home-office"
        assert data["image"] is None

    def test_create_requires_name(self, auth_client: TestClient) -> None:
        response = auth_client.post("/api/categories", json={})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_create_short_name(self, auth_client: TestClient) -> None:
        response = auth_client.post("/api/categories", json={"name": "A"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NAME_TOO_SHORT"

    def test_create_duplicate(self, auth_client: TestClient) -> None:
        create_category(auth_client, "Desks")

        response = auth_client.post("/api/categories", json={"name": "Desks"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_rename(self, auth_client: TestClient) -> None:
        created = create_category(auth_client, "Desks")

        response = auth_client.patch(
            f"/api/categories/{created['id']}", json={"name": "Work Desks"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["slug"] == "work-desks"

    def test_delete_keeps_products(self, auth_client: TestClient) -> None:
        category = create_category(auth_client, "Desks")
        created = auth_client.post(
            "/api/products",
            json={"title": "Oak Desk", "category_id": category["id"]},
        )
        product_id = created.json()["data"]["id"]

        response = auth_client.delete(f"/api/categories/{category['id']}")

        assert response.status_code == 200
        assert auth_client.get(f"/api/categories/{category['id']}").status_code == 404
        product = auth_client.get(f"/api/products/{product_id}").json()["data"]
        assert product["category"] is None
