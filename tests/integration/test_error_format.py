"""Integration tests for standardized error responses."""

import re

import pytest

pytestmark = pytest.mark.integration

BASE_URL = "/api/v1/products"
TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")


def _assert_error_shape(data: dict, path: str) -> None:
    assert set(data) <= {"errorCode", "message", "details", "timestamp", "path"}
    assert data["errorCode"]
    assert data["message"]
    assert TIMESTAMP_RE.match(data["timestamp"])
    assert data["path"] == path


class TestStandardizedErrors:
    def test_not_found_has_standard_format(self, api_client):
        response = api_client.get(f"{BASE_URL}/missing")

        assert response.status_code == 404
        _assert_error_shape(response.json(), f"{BASE_URL}/missing")
        assert "details" not in response.json()

    def test_validation_error_has_details(self, api_client):
        response = api_client.post(BASE_URL, {}, format="json")

        assert response.status_code == 400
        data = response.json()
        _assert_error_shape(data, BASE_URL)
        assert data["errorCode"] == "VALIDATION_ERROR"
        assert "title is required" in data["details"]
        assert "storeId is required" in data["details"]

    def test_malformed_json_returns_400(self, api_client):
        response = api_client.post(
            BASE_URL, data="{", content_type="application/json"
        )

        assert response.status_code == 400
        data = response.json()
        _assert_error_shape(data, BASE_URL)
        assert data["errorCode"] == "VALIDATION_ERROR"

    def test_non_json_body_returns_415(self, api_client):
        response = api_client.post(
            BASE_URL, data="title=x", content_type="application/x-www-form-urlencoded"
        )

        assert response.status_code == 415
        assert response.json()["errorCode"] == "UNSUPPORTED_MEDIA_TYPE"

    def test_method_not_allowed(self, api_client):
        response = api_client.delete(BASE_URL)

        assert response.status_code == 405
        data = response.json()
        _assert_error_shape(data, BASE_URL)
        assert data["errorCode"] == "METHOD_NOT_ALLOWED"

    def test_business_rule_violation(self, api_client):
        created = api_client.post(
            BASE_URL,
            {
                "title": "Widget",
                "price": 1.5,
                "storeId": "STORE-001",
                "category": "Tools",
                "stock": 1,
            },
            format="json",
        ).json()
        path = f"{BASE_URL}/{created['productUuid']}/stock/reduce"

        response = api_client.post(f"{path}?quantity=2")

        assert response.status_code == 400
        data = response.json()
        _assert_error_shape(data, path)
        assert data["errorCode"] == "INSUFFICIENT_STOCK"

    def test_unexpected_error_returns_500(self, api_client, monkeypatch):
        def _explode(self, *args, **kwargs):
            raise RuntimeError("connection reset")

        monkeypatch.setattr(
            "modules.products.services.ProductService.get_products_by_store",
            _explode,
        )

        response = api_client.get(f"{BASE_URL}/store/STORE-001")

        assert response.status_code == 500
        data = response.json()
        assert data["errorCode"] == "INTERNAL_SERVER_ERROR"
        assert data["message"] == "An unexpected error occurred"
