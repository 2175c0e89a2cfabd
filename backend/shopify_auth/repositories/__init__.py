"""Storage of store access token records."""

from shopify_auth.repositories.token_repository import (
    TokenRepository,
    SqlAlchemyTokenRepository,
)

__all__ = [
    "TokenRepository",
    "SqlAlchemyTokenRepository",
]
