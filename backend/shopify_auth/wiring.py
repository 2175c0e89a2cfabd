"""
Assembly of the token lifecycle components from configuration.

Usage:
    config = load_shopify_config()
    token_service = build_token_service(config, db_session)
    token_client = build_token_response_client(config)
"""

from typing import Optional

import httpx
from sqlalchemy.orm import Session

from shopify_auth.config.shopify import ShopifyAppConfig
from shopify_auth.oauth.registration import (
    InMemoryClientRegistrationRepository,
    build_shopify_registration,
)
from shopify_auth.oauth.token_client import (
    HttpxAuthorizationCodeTokenResponseClient,
    ShopifyAuthorizationCodeTokenResponseClient,
)
from shopify_auth.repositories.token_repository import SqlAlchemyTokenRepository
from shopify_auth.services.token_service import TokenService
from shopify_auth.utils.encryption import CredentialCipher


def build_token_service(config: ShopifyAppConfig, db_session: Session) -> TokenService:
    """TokenService over the SQL repository and the configured registration."""
    return TokenService(
        token_repository=SqlAlchemyTokenRepository(db_session),
        cipher=CredentialCipher(config.cipher_password, iterations=config.kdf_iterations),
        registration_repository=InMemoryClientRegistrationRepository(
            [build_shopify_registration(config)]
        ),
    )


def build_token_response_client(
    config: ShopifyAppConfig,
    http_client: Optional[httpx.Client] = None,
) -> ShopifyAuthorizationCodeTokenResponseClient:
    """Store-aware token exchange over httpx."""
    return ShopifyAuthorizationCodeTokenResponseClient(
        HttpxAuthorizationCodeTokenResponseClient(
            http_client=http_client,
            timeout=config.token_exchange_timeout,
        )
    )
