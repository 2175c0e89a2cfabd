"""
Tests for the Shopify app uninstalled webhook.

SECURITY:
- Unsigned or wrongly signed webhooks never reach the token service
"""

import base64
import hashlib
import hmac
import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from shopify_auth.api.app import create_app
from shopify_auth.integrations.shopify.webhooks import (
    is_valid_shop_domain,
    verify_webhook_signature,
)
from shopify_auth.services.token_service import TokenService

SECRET = "test-api-secret"
SHOP = "mystore.myshopify.com"
PATH = "/webhooks/shopify/app-uninstalled"


def _sign(body: bytes, secret: str = SECRET) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def _headers(body: bytes, shop: str = SHOP, signature: str = None) -> dict:
    return {
        "X-Shopify-Topic": "app/uninstalled",
        "X-Shopify-Shop-Domain": shop,
        "X-Shopify-Hmac-Sha256": signature if signature is not None else _sign(body),
        "Content-Type": "application/json",
    }


@pytest.fixture
def token_service():
    return MagicMock(spec=TokenService)


@pytest.fixture
def client(token_service):
    return TestClient(create_app(token_service, shopify_api_secret=SECRET))


class TestVerifyWebhookSignature:

    def test_valid_signature(self):
        body = b'{"id": 1}'
        assert verify_webhook_signature(body, _sign(body), SECRET) is True

    def test_invalid_signature(self):
        assert verify_webhook_signature(b'{"id": 1}', "invalid-hmac", SECRET) is False

    def test_missing_signature(self):
        assert verify_webhook_signature(b'{"id": 1}', None, SECRET) is False

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("SHOPIFY_API_SECRET", "env-secret")
        body = b"{}"
        assert verify_webhook_signature(body, _sign(body, "env-secret")) is True

    def test_no_secret_configured(self, monkeypatch):
        monkeypatch.delenv("SHOPIFY_API_SECRET", raising=False)
        body = b"{}"
        assert verify_webhook_signature(body, _sign(body)) is False


class TestShopDomainValidation:

    def test_valid_shop_domain(self):
        assert is_valid_shop_domain("mystore.myshopify.com") is True
        assert is_valid_shop_domain("test-shop.myshopify.com") is True
        assert is_valid_shop_domain("123shop.myshopify.com") is True

    def test_invalid_shop_domain(self):
        assert is_valid_shop_domain("invalid") is False
        assert is_valid_shop_domain("mystore.com") is False
        assert is_valid_shop_domain(".myshopify.com") is False
        assert is_valid_shop_domain("") is False
        assert is_valid_shop_domain(None) is False
        assert is_valid_shop_domain("MYSTORE.myshopify.com") is False


class TestAppUninstalledWebhook:

    def test_signed_webhook_uninstalls_store(self, client, token_service):
        body = json.dumps({"id": 1, "domain": SHOP}).encode("utf-8")

        response = client.post(PATH, content=body, headers=_headers(body))

        assert response.status_code == 200
        assert response.json() == {"status": "processed"}
        token_service.uninstall_store.assert_called_once_with(SHOP)

    def test_invalid_signature_is_rejected(self, client, token_service):
        body = b'{"id": 1}'

        response = client.post(PATH, content=body, headers=_headers(body, signature="bad"))

        assert response.status_code == 401
        token_service.uninstall_store.assert_not_called()

    def test_invalid_shop_domain_is_rejected(self, client, token_service):
        body = b'{"id": 1}'

        response = client.post(PATH, content=body, headers=_headers(body, shop="evil.example.com"))

        assert response.status_code == 400
        token_service.uninstall_store.assert_not_called()

    def test_missing_headers_are_rejected(self, client, token_service):
        response = client.post(PATH, content=b"{}")

        assert response.status_code == 422
        token_service.uninstall_store.assert_not_called()

    def test_processing_failure_returns_500_for_redelivery(self, client, token_service):
        token_service.uninstall_store.side_effect = RuntimeError("db down")
        body = b'{"id": 1}'

        response = client.post(PATH, content=body, headers=_headers(body))

        assert response.status_code == 500
        assert response.json()["error"] == {
            "code": "HTTP_ERROR",
            "message": "Uninstall failed",
            "details": {},
        }
        assert "db down" not in response.text
        token_service.uninstall_store.assert_called_once_with(SHOP)

    def test_rejected_webhook_uses_error_shape(self, client):
        body = b'{"id": 1}'

        response = client.post(
            PATH,
            content=body,
            headers={**_headers(body, signature="bad"), "X-Correlation-ID": "corr-401"},
        )

        assert response.status_code == 401
        assert response.json() == {
            "error": {
                "code": "HTTP_ERROR",
                "message": "Invalid webhook signature",
                "details": {},
            }
        }
        assert "detail" not in response.json()
        assert response.headers["X-Correlation-ID"] == "corr-401"

    def test_invalid_shop_domain_uses_error_shape(self, client):
        body = b'{"id": 1}'

        response = client.post(PATH, content=body, headers=_headers(body, shop="evil.example.com"))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "HTTP_ERROR"
        assert response.json()["error"]["message"] == "Invalid shop domain"

    def test_missing_token_service_returns_503(self):
        app = create_app(MagicMock(spec=TokenService), shopify_api_secret=SECRET)
        app.state.token_service = None
        body = b'{"id": 1}'

        response = TestClient(app).post(PATH, content=body, headers=_headers(body))

        assert response.status_code == 503

    def test_responses_carry_correlation_id(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "corr-123"})

        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == "corr-123"
