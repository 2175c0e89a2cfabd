"""Configuration module for the Shopify authorization backend."""

from shopify_auth.config.shopify import (
    ShopifyAppConfig,
    load_shopify_config,
    parse_scopes,
    SHOPIFY_AUTHORIZATION_URI_TEMPLATE,
    SHOPIFY_TOKEN_URI_TEMPLATE,
)

__all__ = [
    "ShopifyAppConfig",
    "load_shopify_config",
    "parse_scopes",
    "SHOPIFY_AUTHORIZATION_URI_TEMPLATE",
    "SHOPIFY_TOKEN_URI_TEMPLATE",
]
