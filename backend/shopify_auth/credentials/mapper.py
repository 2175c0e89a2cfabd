"""
Conversion between OAuth2 authorization objects and stored records.

Both directions are pure apart from the random salt drawn when a record
is built.
"""

import logging

from shopify_auth.credentials.records import StoreAccessTokenRecord
from shopify_auth.credentials.tokens import DecryptedTokenAndSalt, EncryptedTokenAndSalt
from shopify_auth.oauth.models import (
    AuthenticationToken,
    AuthorizedClient,
    ClientRegistration,
    OAuth2AccessToken,
)
from shopify_auth.utils.encryption import CredentialCipher

logger = logging.getLogger(__name__)


class StoreAccessTokenMapper:
    """Builds StoreAccessTokenRecords and rebuilds AuthorizedClients from them."""

    def to_record(
        self,
        authorized_client: AuthorizedClient,
        principal: AuthenticationToken,
        cipher: CredentialCipher,
    ) -> StoreAccessTokenRecord:
        """
        Encrypt the client's access token under a fresh salt.

        The store domain is the principal's name.

        Raises:
            EncryptionError: If the token cannot be encrypted
            ValueError: If the principal has no name
        """
        access_token = authorized_client.access_token

        salt = cipher.generate_salt()
        encrypted = EncryptedTokenAndSalt(
            encrypted_token=cipher.encrypt(access_token.token_value, salt),
            salt=salt,
        )

        return StoreAccessTokenRecord(
            store_domain=principal.name,
            token=encrypted,
            granted_authorities=frozenset(access_token.scopes),
            token_type=access_token.token_type,
            issued_at=access_token.issued_at,
            expires_at=access_token.expires_at,
        )

    def from_record(
        self,
        record: StoreAccessTokenRecord,
        decrypted: DecryptedTokenAndSalt,
        registration: ClientRegistration,
    ) -> AuthorizedClient:
        """
        Rebuild the authorized client for record's store.

        registration is the shared one; its URIs stay templates.

        Raises:
            ValueError: If decrypted was produced with a different salt
        """
        if decrypted.salt != record.salt:
            raise ValueError("Decrypted token does not belong to this record")

        access_token = OAuth2AccessToken(
            token_value=decrypted.decrypted_token,
            token_type=record.token_type,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
            scopes=record.granted_authorities,
        )

        return AuthorizedClient(
            client_registration=registration,
            principal_name=record.store_domain,
            access_token=access_token,
        )
