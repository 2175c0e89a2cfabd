"""
Token/salt pairs in their two states.

The container type says whether the token is ciphertext or plaintext;
the two are never converted into each other implicitly.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EncryptedTokenAndSalt:
    """Ciphertext of an access token and the salt it was encrypted with."""
    encrypted_token: str = field(repr=False)
    salt: str = field(repr=False)

    def __post_init__(self):
        if not self.encrypted_token or not self.salt:
            raise ValueError("encrypted_token and salt are both required")


@dataclass(frozen=True)
class DecryptedTokenAndSalt:
    """
    Plaintext access token and the salt used to decrypt it.

    SECURITY: Lives in memory only, NEVER log or persist.
    """
    decrypted_token: str = field(repr=False)
    salt: str = field(repr=False)
