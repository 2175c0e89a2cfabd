"""
Token lifecycle service for installed Shopify stores.

Handles:
- Install: encrypt and store the token obtained by OAuth login
- Lookup: fetch, decrypt and rebuild a store's authorized client
- Re-authorization: replace a store's token and salt
- Uninstall: delete a store's record

SECURITY:
- Every write draws a fresh salt; old ciphertext is never reused
- Plaintext tokens only exist in memory for the duration of a call
- An unreadable record is reported as unusable, never raised to callers

Nothing is cached between calls; every operation reads the repository.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from shopify_auth.credentials.mapper import StoreAccessTokenMapper
from shopify_auth.credentials.records import StoreAccessTokenRecord
from shopify_auth.credentials.tokens import DecryptedTokenAndSalt
from shopify_auth.oauth.models import AuthenticationToken, AuthorizedClient
from shopify_auth.oauth.registration import (
    SHOPIFY_REGISTRATION_ID,
    ClientRegistrationRepository,
)
from shopify_auth.platform.errors import MissingRegistrationError
from shopify_auth.repositories.token_repository import TokenRepository
from shopify_auth.utils.encryption import CredentialCipher, DecryptionError

logger = logging.getLogger(__name__)


class StoreLookupStatus(str, enum.Enum):
    """Outcome of reading a store's credentials."""
    FOUND = "found"
    NOT_FOUND = "not_found"    # Store never installed or uninstalled
    UNREADABLE = "unreadable"  # Record exists but cannot be decrypted


@dataclass(frozen=True)
class StoreLookup:
    """Result of TokenService.lookup_store."""
    store_domain: str
    status: StoreLookupStatus
    authorized_client: Optional[AuthorizedClient] = None

    @property
    def needs_authorization(self) -> bool:
        """True when the store must go through OAuth again."""
        return self.status != StoreLookupStatus.FOUND


class TokenService:
    """
    Install/read/update/uninstall of store access tokens.

    Depends on a TokenRepository for storage, a CredentialCipher for
    encryption at rest and a ClientRegistrationRepository for the shared
    Shopify registration.
    """

    def __init__(
        self,
        token_repository: TokenRepository,
        cipher: CredentialCipher,
        registration_repository: ClientRegistrationRepository,
        mapper: Optional[StoreAccessTokenMapper] = None,
        registration_id: str = SHOPIFY_REGISTRATION_ID,
    ):
        self.token_repository = token_repository
        self.cipher = cipher
        self.registration_repository = registration_repository
        self.mapper = mapper or StoreAccessTokenMapper()
        self.registration_id = registration_id

    def _build_record(
        self,
        authorized_client: AuthorizedClient,
        principal: AuthenticationToken,
    ) -> StoreAccessTokenRecord:
        return self.mapper.to_record(authorized_client, principal, self.cipher)

    def save_new_store(
        self,
        authorized_client: AuthorizedClient,
        principal: AuthenticationToken,
    ) -> None:
        """
        Store credentials for a newly installed store.

        Raises:
            EncryptionError: If the token cannot be encrypted
        """
        record = self._build_record(authorized_client, principal)
        self.token_repository.create(record)

        logger.info(
            "Store installed",
            extra={"store_domain": record.store_domain}
        )

    def update_store(
        self,
        authorized_client: AuthorizedClient,
        principal: AuthenticationToken,
    ) -> bool:
        """
        Replace a store's credentials after re-authorization.

        Token and salt are both regenerated.

        Returns:
            False when the store is not installed; nothing is stored

        Raises:
            EncryptionError: If the token cannot be encrypted
        """
        record = self._build_record(authorized_client, principal)
        if not self.token_repository.update(record):
            logger.warning(
                "Credentials update for store that is not installed",
                extra={"store_domain": record.store_domain}
            )
            return False

        logger.info(
            "Store credentials updated",
            extra={"store_domain": record.store_domain}
        )
        return True

    def does_store_exist(self, store_domain: str) -> bool:
        """Whether a record exists for store_domain. Blank domains never exist."""
        return self.token_repository.find_by_store_domain(store_domain) is not None

    def lookup_store(self, store_domain: str) -> StoreLookup:
        """
        Read and decrypt a store's credentials.

        Returns:
            StoreLookup telling found / not installed / unreadable apart

        Raises:
            MissingRegistrationError: If the shared registration is not configured
        """
        record = self.token_repository.find_by_store_domain(store_domain)
        if record is None:
            logger.debug("Store not installed", extra={"store_domain": store_domain})
            return StoreLookup(store_domain, StoreLookupStatus.NOT_FOUND)

        registration = self.registration_repository.find_by_registration_id(self.registration_id)
        if registration is None:
            logger.error(
                "Client registration missing for installed store",
                extra={"store_domain": store_domain, "registration_id": self.registration_id}
            )
            raise MissingRegistrationError(self.registration_id)

        try:
            decrypted = DecryptedTokenAndSalt(
                decrypted_token=self.cipher.decrypt(record.encrypted_token, record.salt),
                salt=record.salt,
            )
        except DecryptionError as e:
            logger.error(
                "Stored token could not be decrypted",
                extra={"store_domain": store_domain, "error_type": type(e).__name__}
            )
            return StoreLookup(store_domain, StoreLookupStatus.UNREADABLE)

        client = self.mapper.from_record(record, decrypted, registration)
        return StoreLookup(store_domain, StoreLookupStatus.FOUND, client)

    def get_store(self, store_domain: str) -> Optional[AuthorizedClient]:
        """
        Return the authorized client for store_domain.

        Returns:
            None when the store is not installed or its token is unreadable;
            either way the store has to be authorized again

        Raises:
            MissingRegistrationError: If the shared registration is not configured
        """
        return self.lookup_store(store_domain).authorized_client

    def uninstall_store(self, store_domain: Optional[str]) -> None:
        """
        Delete a store's credentials.

        A missing or blank domain is ignored so malformed input can never
        reach the repository's delete.
        """
        if not store_domain or not store_domain.strip():
            logger.debug("Uninstall ignored for empty store domain")
            return

        self.token_repository.delete(store_domain)

        logger.info(
            "Store uninstalled",
            extra={"store_domain": store_domain}
        )
