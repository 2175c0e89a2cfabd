"""
Credentials module for Shopify access tokens at rest.

This module provides:
- Token/salt pairs that keep ciphertext and plaintext apart by type
- The persisted record shape of a store's credentials
- Mapping between OAuth2 authorization objects and records

SECURITY:
- Tokens are encrypted with a per-record salt before storage
- No plaintext tokens outside process memory
- Tokens NEVER appear in logs or reprs
- Allowed in logs: store_domain, scopes

Usage:
    from shopify_auth.credentials import StoreAccessTokenMapper

    mapper = StoreAccessTokenMapper()
    record = mapper.to_record(authorized_client, principal, cipher)
"""

from shopify_auth.credentials.tokens import EncryptedTokenAndSalt, DecryptedTokenAndSalt
from shopify_auth.credentials.records import StoreAccessTokenRecord
from shopify_auth.credentials.mapper import StoreAccessTokenMapper

__all__ = [
    "EncryptedTokenAndSalt",
    "DecryptedTokenAndSalt",
    "StoreAccessTokenRecord",
    "StoreAccessTokenMapper",
]
