"""
Tests for encryption utilities.

Tests salted AES-256-GCM encryption/decryption of access tokens.
"""

import pytest

from shopify_auth.utils.encryption import (
    CredentialCipher,
    DecryptionError,
    EncryptionError,
    InvalidPasswordError,
    derive_key_from_password,
    KEY_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    TAG_SIZE,
)

TEST_ITERATIONS = 1000


class TestCredentialCipher:
    """Tests for CredentialCipher class."""

    def test_init_without_password_raises_error(self):
        """Test that a missing password raises InvalidPasswordError."""
        with pytest.raises(InvalidPasswordError, match="password is required"):
            CredentialCipher(None)
        with pytest.raises(InvalidPasswordError):
            CredentialCipher("")

    def test_init_with_non_positive_iterations_raises_error(self):
        with pytest.raises(ValueError):
            CredentialCipher("password", iterations=0)

    def test_repr_does_not_expose_password(self):
        cipher = CredentialCipher("s3cr3t-pass", iterations=TEST_ITERATIONS)
        assert "s3cr3t-pass" not in repr(cipher)

    def test_generate_salt_is_hex_of_16_bytes(self):
        """Test that generate_salt produces hex-encoded 16 random bytes."""
        salt = CredentialCipher.generate_salt()
        assert len(salt) == SALT_SIZE * 2
        assert len(bytes.fromhex(salt)) == SALT_SIZE

    def test_generate_salt_is_unique(self):
        """Test that salts do not repeat over many draws."""
        salts = [CredentialCipher.generate_salt() for _ in range(10000)]
        assert len(set(salts)) == len(salts)

    def test_encrypt_decrypt_roundtrip(self, cipher: CredentialCipher):
        """Test that a token can be encrypted and decrypted correctly."""
        salt = cipher.generate_salt()
        encrypted = cipher.encrypt("shpat_secret_token", salt)

        assert encrypted != "shpat_secret_token"
        assert cipher.decrypt(encrypted, salt) == "shpat_secret_token"

    def test_roundtrip_unicode_and_empty(self, cipher: CredentialCipher):
        salt = cipher.generate_salt()
        assert cipher.decrypt(cipher.encrypt("tökén-✓", salt), salt) == "tökén-✓"
        assert cipher.decrypt(cipher.encrypt("", salt), salt) == ""

    def test_ciphertext_is_hex_with_tag(self, cipher: CredentialCipher):
        salt = cipher.generate_salt()
        encrypted = cipher.encrypt("abc", salt)

        assert len(bytes.fromhex(encrypted)) == len("abc") + TAG_SIZE

    def test_encryption_is_queryable(self, cipher: CredentialCipher):
        """Same password, salt and token always give the same ciphertext."""
        salt = cipher.generate_salt()
        assert cipher.encrypt("token", salt) == cipher.encrypt("token", salt)

    def test_different_salts_give_different_ciphertext(self, cipher: CredentialCipher):
        encrypted1 = cipher.encrypt("token", cipher.generate_salt())
        encrypted2 = cipher.encrypt("token", cipher.generate_salt())
        assert encrypted1 != encrypted2

    def test_encrypt_with_malformed_salt_raises_error(self, cipher: CredentialCipher):
        with pytest.raises(EncryptionError):
            cipher.encrypt("token", "not-hex")
        with pytest.raises(EncryptionError):
            cipher.encrypt("token", "")

    def test_encrypt_missing_token_raises_error(self, cipher: CredentialCipher):
        with pytest.raises(ValueError):
            cipher.encrypt(None, cipher.generate_salt())

    def test_decrypt_with_appended_garbage_fails(self, cipher: CredentialCipher):
        """Test that a corrupted record raises DecryptionError."""
        salt = cipher.generate_salt()
        encrypted = cipher.encrypt("raw-value", salt)

        with pytest.raises(DecryptionError):
            cipher.decrypt(encrypted + "error", salt)
        with pytest.raises(DecryptionError, match="tampered"):
            cipher.decrypt(encrypted + "00", salt)

    def test_decrypt_with_tampered_ciphertext_fails(self, cipher: CredentialCipher):
        salt = cipher.generate_salt()
        encrypted = cipher.encrypt("raw-value", salt)
        flipped = ("0" if encrypted[0] != "0" else "1") + encrypted[1:]

        with pytest.raises(DecryptionError, match="tampered"):
            cipher.decrypt(flipped, salt)

    def test_decrypt_with_wrong_salt_fails(self, cipher: CredentialCipher):
        encrypted = cipher.encrypt("raw-value", cipher.generate_salt())

        with pytest.raises(DecryptionError):
            cipher.decrypt(encrypted, cipher.generate_salt())

    def test_decrypt_with_malformed_salt_fails(self, cipher: CredentialCipher):
        encrypted = cipher.encrypt("raw-value", cipher.generate_salt())

        with pytest.raises(DecryptionError):
            cipher.decrypt(encrypted, "zz")
        with pytest.raises(DecryptionError):
            cipher.decrypt(encrypted, "")

    def test_decrypt_short_ciphertext_fails(self, cipher: CredentialCipher):
        with pytest.raises(DecryptionError, match="too short"):
            cipher.decrypt("abcd", cipher.generate_salt())

    def test_decrypt_with_wrong_password_fails(self, cipher: CredentialCipher):
        salt = cipher.generate_salt()
        encrypted = cipher.encrypt("raw-value", salt)
        other = CredentialCipher("other-password", iterations=TEST_ITERATIONS)

        with pytest.raises(DecryptionError):
            other.decrypt(encrypted, salt)


class TestDeriveKeyFromPassword:
    """Tests for password-based key derivation."""

    def test_derive_returns_key_and_nonce(self):
        key, nonce = derive_key_from_password("my_password", b"\x00" * 16, iterations=TEST_ITERATIONS)
        assert len(key) == KEY_SIZE
        assert len(nonce) == NONCE_SIZE

    def test_same_password_and_salt_produces_same_key(self):
        salt = bytes.fromhex(CredentialCipher.generate_salt())
        first = derive_key_from_password("my_password", salt, iterations=TEST_ITERATIONS)
        second = derive_key_from_password("my_password", salt, iterations=TEST_ITERATIONS)
        assert first == second

    def test_different_salts_produce_different_keys(self):
        key1, _ = derive_key_from_password("same", b"\x01" * 16, iterations=TEST_ITERATIONS)
        key2, _ = derive_key_from_password("same", b"\x02" * 16, iterations=TEST_ITERATIONS)
        assert key1 != key2
