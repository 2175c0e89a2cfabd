"""
Database models for stored Shopify credentials.
"""

from shopify_auth.models.base import TimestampMixin
from shopify_auth.models.store_access_token import StoreAccessToken

__all__ = [
    "TimestampMixin",
    "StoreAccessToken",
]
