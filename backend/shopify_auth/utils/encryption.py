"""
Encryption utilities for storing Shopify access tokens at rest.

Implements salted, queryable AES-256-GCM encryption of token strings.

SECURITY:
- A master password is combined with a per-record salt through PBKDF2
  to derive a key and nonce unique to that record
- Every stored token MUST get a fresh salt from generate_salt()
- A (password, salt) pair encrypts exactly one token value
- Ciphertext is authenticated: tampered or truncated records fail to decrypt

Encryption is deterministic for a given (password, salt, plaintext), so a
stored ciphertext can be matched by re-encrypting a candidate value with the
record's salt.

Usage:
    from shopify_auth.utils.encryption import CredentialCipher

    cipher = CredentialCipher(password=os.environ["SHOPIFY_CIPHER_PASSWORD"])

    salt = cipher.generate_salt()
    encrypted = cipher.encrypt("shpat_xxx", salt)

    token = cipher.decrypt(encrypted, salt)
"""

import secrets
import logging
from typing import Tuple, Optional

from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.exceptions import InvalidTag

logger = logging.getLogger(__name__)


# AES-GCM constants
NONCE_SIZE = 12  # 96 bits, recommended for AES-GCM
TAG_SIZE = 16    # 128 bits, standard for AES-GCM
KEY_SIZE = 32    # 256 bits for AES-256
SALT_SIZE = 16   # bytes of randomness per record, hex-encoded to 32 chars

DEFAULT_KDF_ITERATIONS = 100000


class EncryptionError(Exception):
    """Raised when encryption fails."""
    pass


class DecryptionError(Exception):
    """Raised when a ciphertext cannot be decrypted with the given salt."""
    pass


class InvalidPasswordError(Exception):
    """Raised when the master password is missing."""
    pass


def derive_key_from_password(
    password: str,
    salt: bytes,
    iterations: int = DEFAULT_KDF_ITERATIONS,
) -> Tuple[bytes, bytes]:
    """
    Derive an AES key and GCM nonce from a password and salt using PBKDF2.

    Args:
        password: Master password
        salt: Record-specific salt bytes
        iterations: PBKDF2 iterations

    Returns:
        Tuple of (key, nonce)
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE + NONCE_SIZE,
        salt=salt,
        iterations=iterations,
    )
    material = kdf.derive(password.encode("utf-8"))
    return material[:KEY_SIZE], material[KEY_SIZE:]


def _decode_salt(salt: str) -> bytes:
    if not salt:
        raise ValueError("salt is required")
    return bytes.fromhex(salt)


class CredentialCipher:
    """
    Salted text encryptor for access tokens.

    Stateless apart from the master password: every call takes the salt of
    the record being written or read.

    SECURITY:
    - Never log the password, plaintext, ciphertext or salt
    - Never reuse a salt for a different token value
    """

    def __init__(self, password: Optional[str], iterations: int = DEFAULT_KDF_ITERATIONS):
        """
        Initialize cipher with the master password.

        Args:
            password: Master password shared by all records
            iterations: PBKDF2 iterations used for every key derivation

        Raises:
            InvalidPasswordError: If password is missing
        """
        if not password:
            raise InvalidPasswordError("Cipher password is required")
        if iterations < 1:
            raise ValueError("iterations must be positive")

        self._password = password
        self._iterations = iterations

    def __repr__(self) -> str:
        """Safe repr - NEVER include the password."""
        return f"<CredentialCipher(iterations={self._iterations})>"

    @staticmethod
    def generate_salt() -> str:
        """
        Generate a new random salt for one record.

        Returns:
            Hex-encoded 16-byte cryptographically secure random salt
        """
        return secrets.token_hex(SALT_SIZE)

    def _aesgcm_for(self, salt: str) -> Tuple[AESGCM, bytes]:
        key, nonce = derive_key_from_password(
            self._password,
            _decode_salt(salt),
            self._iterations,
        )
        return AESGCM(key), nonce

    def encrypt(self, plaintext: str, salt: str) -> str:
        """
        Encrypt a token with the key derived from salt.

        Args:
            plaintext: Raw token value
            salt: Salt from generate_salt()

        Returns:
            Hex-encoded ciphertext with authentication tag appended

        Raises:
            EncryptionError: If encryption fails (including a malformed salt)
        """
        if plaintext is None:
            raise ValueError("Cannot encrypt a missing token")

        try:
            aesgcm, nonce = self._aesgcm_for(salt)
            return aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None).hex()
        except Exception as e:
            logger.error(
                "Token encryption failed",
                extra={"operation": "encrypt", "error_type": type(e).__name__}
            )
            raise EncryptionError("Failed to encrypt token") from e

    def decrypt(self, ciphertext: str, salt: str) -> str:
        """
        Decrypt a token produced by encrypt() with the same password and salt.

        Args:
            ciphertext: Hex-encoded ciphertext from storage
            salt: Salt stored with the ciphertext

        Returns:
            Decrypted plaintext token (handle with care!)

        Raises:
            DecryptionError: If ciphertext or salt is malformed, or the
                authentication tag does not match
        """
        try:
            data = bytes.fromhex(ciphertext)
            aesgcm, nonce = self._aesgcm_for(salt)
        except (TypeError, ValueError) as e:
            raise DecryptionError("Ciphertext or salt is not valid hex") from e

        if len(data) < TAG_SIZE:
            raise DecryptionError("Ciphertext is too short")

        try:
            plaintext = aesgcm.decrypt(nonce, data, None)
        except InvalidTag:
            raise DecryptionError(
                "Decryption failed: data may have been tampered with"
            )

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError("Decrypted token is not valid UTF-8") from e
