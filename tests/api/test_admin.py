"""Tests for status, image and variant admin endpoints."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def product_id(auth_client: TestClient) -> str:
    """Create a product through the API."""
    response = auth_client.post("/api/products", json={"title": "Oak Desk"})
    return response.json()["data"]["id"]


def product_detail(client: TestClient, product_id: str) -> dict:
    return client.get(f"/api/products/{product_id}").json()["data"]


class TestStatuses:
    """Tests for /api/product-statuses."""

    def test_list(self, auth_client: TestClient) -> None:
        response = auth_client.get("/api/product-statuses")

        assert response.status_code == 200
        assert [s["name"] for s in response.json()["data"]] == ["DRAFT", "PUBLISHED"]

    def test_list_requires_key(self, client: TestClient) -> None:
        assert client.get("/api/product-statuses").status_code == 401

    def test_create(self, auth_client: TestClient) -> None:
        response = auth_client.post(
            "/api/product-statuses",
            json={"name": "archived", "description": "Retired products"},
        )

        assert response.status_code == 201
        assert response.json()["data"] == {
            "name": "ARCHIVED",
            "description": "Retired products",
        }

    def test_create_invalid(self, auth_client: TestClient) -> None:
        response = auth_client.post("/api/product-statuses", json={"name": "on hold"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"


class TestImages:
    """Tests for product image endpoints."""

    def test_add_and_switch_primary(self, auth_client: TestClient, product_id: str) -> None:
        base = f"/api/products/{product_id}/images"
        first = auth_client.post(base, json={"url": "https://img/1.jpg", "is_primary": True})
        second = auth_client.post(base, json={"url": "https://img/2.jpg"})
        assert first.status_code == 201
        assert second.json()["data"]["is_primary"] is False

        response = auth_client.post(f"{base}/{second.json()['data']['id']}/primary")

        assert response.status_code == 200
        images = {i["url"]: i["is_primary"] for i in product_detail(auth_client, product_id)["images"]}
        assert images == {"https://img/1.jpg": False, "https://img/2.jpg": True}

        listed = auth_client.get("/api/products").json()["data"]["items"][0]
        assert listed["primary_image"]["url"] == "https://img/2.jpg"

    def test_remove(self, auth_client: TestClient, product_id: str) -> None:
        base = f"/api/products/{product_id}/images"
        image_id = auth_client.post(base, json={"url": "https://img/1.jpg"}).json()["data"]["id"]

        response = auth_client.delete(f"{base}/{image_id}")

        assert response.status_code == 200
        assert product_detail(auth_client, product_id)["images"] == []
        assert auth_client.delete(f"{base}/{image_id}").status_code == 404

    def test_unknown_product(self, auth_client: TestClient) -> None:
        response = auth_client.post(
            "/api/products/00000000-0000-0000-0000-000000000000/images",
            json={"url": "https://img/1.jpg"},
        )
        assert response.status_code == 404


class TestVariants:
    """Tests for variant and inventory endpoints."""

    def test_add_variant(self, auth_client: TestClient, product_id: str) -> None:
        response = auth_client.post(
            f"/api/products/{product_id}/variants",
            json={
                "name": "Natural",
                "price": "199.00",
                "sku_prefix": "OAK-NAT",
                "color_name": "Natural",
                "material": "Oak",
                "initial_quantity": 3,
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["price"] == 199.0
        assert data["inventory"][0]["sku"] == "OAK-NAT"
        assert data["inventory"][0]["quantity"] == 3

        facets = auth_client.get("/api/products/filters").json()["data"]
        assert facets["materials"] == ["Oak"]
        assert facets["price_min"] == 199.0

    def test_negative_price_rejected(self, auth_client: TestClient, product_id: str) -> None:
        response = auth_client.post(
            f"/api/products/{product_id}/variants",
            json={"name": "Natural", "price": "-5"},
        )
        assert response.status_code == 400

    def test_duplicate_sku(self, auth_client: TestClient, product_id: str) -> None:
        body = {"name": "Natural", "price": "10", "sku_prefix": "OAK-1"}
        auth_client.post(f"/api/products/{product_id}/variants", json=body)

        response = auth_client.post(f"/api/products/{product_id}/variants", json=body)

        assert response.status_code == 409

    def test_update_and_inventory(self, auth_client: TestClient, product_id: str) -> None:
        created = auth_client.post(
            f"/api/products/{product_id}/variants",
            json={"name": "Natural", "price": "10"},
        )
        variant_id = created.json()["data"]["id"]

        updated = auth_client.patch(f"/api/variants/{variant_id}", json={"price": "12.5"})
        inventory = auth_client.put(
            f"/api/variants/{variant_id}/inventory",
            json={"quantity": 8, "reserved": 1},
        )

        assert updated.status_code == 200
        assert updated.json()["data"]["price"] == 12.5
        assert inventory.status_code == 200
        assert inventory.json()["data"]["quantity"] == 8
        assert inventory.json()["data"]["reserved"] == 1

    def test_delete_variant(self, auth_client: TestClient, product_id: str) -> None:
        created = auth_client.post(
            f"/api/products/{product_id}/variants",
            json={"name": "Natural", "price": "10"},
        )
        variant_id = created.json()["data"]["id"]

        assert auth_client.delete(f"/api/variants/{variant_id}").status_code == 200
        assert auth_client.delete(f"/api/variants/{variant_id}").status_code == 404
        assert product_detail(auth_client, product_id)["variants"] == []

    def test_requires_key(self, client: TestClient) -> None:
        response = client.put("/api/variants/abc/inventory", json={"quantity": 1})
        assert response.status_code == 401
