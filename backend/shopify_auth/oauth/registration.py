"""
Client registrations: the non-store-specific OAuth2 configuration.

A single Shopify registration is shared by every installed store. Its
URIs are templates; the store-specific token endpoint is derived per
exchange and never written back here.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from shopify_auth.config.shopify import (
    ShopifyAppConfig,
    SHOPIFY_AUTHORIZATION_URI_TEMPLATE,
    SHOPIFY_TOKEN_URI_TEMPLATE,
)
from shopify_auth.oauth.models import ClientAuthenticationMethod, ClientRegistration

logger = logging.getLogger(__name__)

SHOPIFY_REGISTRATION_ID = "shopify"


class ClientRegistrationRepository(ABC):
    """Lookup of client registrations by registration id."""

    @abstractmethod
    def find_by_registration_id(self, registration_id: str) -> Optional[ClientRegistration]:
        """Return the registration, or None when it is not configured."""
        pass


class InMemoryClientRegistrationRepository(ClientRegistrationRepository):
    """Registrations fixed at startup."""

    def __init__(self, registrations: Iterable[ClientRegistration] = ()):
        self._registrations: Dict[str, ClientRegistration] = {}
        for registration in registrations:
            if registration.registration_id in self._registrations:
                raise ValueError(
                    f"Duplicate registration id '{registration.registration_id}'"
                )
            self._registrations[registration.registration_id] = registration

    def find_by_registration_id(self, registration_id: str) -> Optional[ClientRegistration]:
        return self._registrations.get(registration_id)


def build_shopify_registration(config: ShopifyAppConfig) -> ClientRegistration:
    """Build the shared Shopify registration from app configuration."""
    return ClientRegistration(
        registration_id=SHOPIFY_REGISTRATION_ID,
        client_id=config.api_key,
        client_secret=config.api_secret,
        client_authentication_method=ClientAuthenticationMethod.CLIENT_SECRET_POST,
        redirect_uri_template=config.redirect_uri,
        scopes=config.scopes,
        authorization_uri=SHOPIFY_AUTHORIZATION_URI_TEMPLATE,
        token_uri=SHOPIFY_TOKEN_URI_TEMPLATE,
        client_name="Shopify",
    )
