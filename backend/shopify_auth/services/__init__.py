"""Application services."""

from shopify_auth.services.token_service import (
    TokenService,
    StoreLookup,
    StoreLookupStatus,
)

__all__ = [
    "TokenService",
    "StoreLookup",
    "StoreLookupStatus",
]
