"""
StoreAccessToken model - encrypted Shopify access tokens, one row per store.

SECURITY REQUIREMENTS:
- access_token holds ciphertext only; it is unreadable without salt
- salt is unique per row and replaced together with access_token
- Tokens and salts are NEVER logged
"""

import uuid

from sqlalchemy import Column, String, DateTime, Text

from shopify_auth.db_base import Base
from shopify_auth.models.base import TimestampMixin


class StoreAccessToken(Base, TimestampMixin):
    """Persisted credentials of an installed store."""

    __tablename__ = "shopify_store_access_tokens"

    id = Column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Primary key (UUID)"
    )

    store_domain = Column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Shop domain, e.g. example.myshopify.com"
    )

    # Encrypted token - NEVER log these values
    access_token = Column(
        Text,
        nullable=False,
        comment="Encrypted access token (hex) - NEVER log"
    )
    salt = Column(
        String(64),
        nullable=False,
        comment="Per-row salt required to decrypt access_token"
    )

    # Token metadata (safe to log)
    token_type = Column(
        String(50),
        default="Bearer",
        nullable=False,
        comment="Token type"
    )
    issued_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the access token was issued"
    )
    expires_at = Column(
        DateTime(timezone=True),
        nullable=True,
        comment="When the access token expires (offline tokens never do)"
    )
    scopes = Column(
        Text,
        nullable=True,
        comment="Comma separated granted OAuth scopes"
    )

    def __repr__(self) -> str:
        """Safe repr - NEVER include token values."""
        return (
            f"<StoreAccessToken("
            f"id={self.id}, "
            f"store_domain={self.store_domain}, "
            f"scopes={self.scopes})>"
        )
