"""
Shopify app configuration.

All values come from environment variables so deployments configure the
app without code changes.

SECURITY:
- SHOPIFY_API_SECRET and SHOPIFY_CIPHER_PASSWORD are never logged
"""

import os
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from shopify_auth.platform.errors import ConfigurationError
from shopify_auth.utils.encryption import DEFAULT_KDF_ITERATIONS

logger = logging.getLogger(__name__)

DEFAULT_SCOPES = "read_products"
DEFAULT_TOKEN_EXCHANGE_TIMEOUT_SECONDS = 10.0

# Shopify endpoints are per store; {shop} is the myshopify.com domain
SHOPIFY_AUTHORIZATION_URI_TEMPLATE = "https://{shop}/admin/oauth/authorize"
SHOPIFY_TOKEN_URI_TEMPLATE = "https://{shop}/admin/oauth/access_token"
REDIRECT_PATH = "/login/app/oauth2/code/shopify"


@dataclass(frozen=True)
class ShopifyAppConfig:
    """Settings shared by every installed store."""
    api_key: str
    api_secret: str = field(repr=False)
    cipher_password: str = field(repr=False)
    scopes: FrozenSet[str] = frozenset({DEFAULT_SCOPES})
    app_url: str = ""
    kdf_iterations: int = DEFAULT_KDF_ITERATIONS
    token_exchange_timeout: float = DEFAULT_TOKEN_EXCHANGE_TIMEOUT_SECONDS

    @property
    def redirect_uri(self) -> str:
        return f"{self.app_url.rstrip('/')}{REDIRECT_PATH}"


def parse_scopes(raw: Optional[str]) -> FrozenSet[str]:
    """Split a comma separated scope list, ignoring blanks."""
    if not raw:
        return frozenset()
    return frozenset(s.strip() for s in raw.split(",") if s.strip())


def _required(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigurationError(
            f"{name} environment variable is required",
            details={"variable": name},
        )
    return value


def _number(name: str, default, cast):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number",
            details={"variable": name},
        )


def load_shopify_config() -> ShopifyAppConfig:
    """
    Read the Shopify app configuration from the environment.

    Raises:
        ConfigurationError: If a required variable is missing or malformed
    """
    config = ShopifyAppConfig(
        api_key=_required("SHOPIFY_API_KEY"),
        api_secret=_required("SHOPIFY_API_SECRET"),
        cipher_password=_required("SHOPIFY_CIPHER_PASSWORD"),
        scopes=parse_scopes(os.getenv("SHOPIFY_SCOPES", DEFAULT_SCOPES)),
        app_url=os.getenv("APP_URL", ""),
        kdf_iterations=_number("SHOPIFY_CIPHER_KDF_ITERATIONS", DEFAULT_KDF_ITERATIONS, int),
        token_exchange_timeout=_number(
            "SHOPIFY_TOKEN_EXCHANGE_TIMEOUT", DEFAULT_TOKEN_EXCHANGE_TIMEOUT_SECONDS, float
        ),
    )

    logger.info(
        "Shopify app configuration loaded",
        extra={"scopes": sorted(config.scopes), "app_url": config.app_url},
    )
    return config
