"""
Utility modules for the Shopify authorization backend.

This package contains shared utilities used across the application.
"""

from shopify_auth.utils.encryption import (
    CredentialCipher,
    EncryptionError,
    DecryptionError,
    InvalidPasswordError,
    derive_key_from_password,
)

__all__ = [
    "CredentialCipher",
    "EncryptionError",
    "DecryptionError",
    "InvalidPasswordError",
    "derive_key_from_password",
]
