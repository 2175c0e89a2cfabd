"""
Shared pytest fixtures for unit tests.

Key derivation uses a low PBKDF2 iteration count to keep tests fast.
"""

from datetime import datetime, timezone

import pytest

from shopify_auth.oauth.models import (
    AuthenticationToken,
    AuthorizedClient,
    ClientAuthenticationMethod,
    ClientRegistration,
    OAuth2AccessToken,
)
from shopify_auth.oauth.registration import SHOPIFY_REGISTRATION_ID
from shopify_auth.utils.encryption import CredentialCipher

TEST_ITERATIONS = 1000
STORE_DOMAIN = "teststore.myshopify.com"


@pytest.fixture
def cipher() -> CredentialCipher:
    """Cipher with a fixed password."""
    return CredentialCipher("password", iterations=TEST_ITERATIONS)


@pytest.fixture
def client_registration() -> ClientRegistration:
    """The shared Shopify registration with templated URIs."""
    return ClientRegistration(
        registration_id=SHOPIFY_REGISTRATION_ID,
        client_id="client-id",
        client_secret="client-secret",
        client_authentication_method=ClientAuthenticationMethod.CLIENT_SECRET_POST,
        redirect_uri_template="{baseUrl}/login/app/oauth2/code/{registrationId}",
        scopes=frozenset({"read_products", "write_products"}),
        authorization_uri="https://{shop}/admin/oauth/authorize",
        token_uri="https://{shop}/admin/oauth/access_token",
        client_name="Shopify",
    )


@pytest.fixture
def access_token() -> OAuth2AccessToken:
    return OAuth2AccessToken(
        token_value="oauth-token",
        issued_at=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        scopes=frozenset({"read_products", "write_products"}),
    )


@pytest.fixture
def authorized_client(client_registration, access_token) -> AuthorizedClient:
    return AuthorizedClient(
        client_registration=client_registration,
        principal_name=STORE_DOMAIN,
        access_token=access_token,
    )


@pytest.fixture
def principal() -> AuthenticationToken:
    return AuthenticationToken(
        name=STORE_DOMAIN,
        authorities=frozenset({"ROLE_USER"}),
        authorized_client_registration_id=SHOPIFY_REGISTRATION_ID,
    )
