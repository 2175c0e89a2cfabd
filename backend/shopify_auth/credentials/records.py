"""
StoreAccessTokenRecord - the persisted shape of a store's credentials.

One record per installed store, keyed by shop domain. Re-authorization
replaces the whole record; the ciphertext and its salt are only ever
written together.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from shopify_auth.credentials.tokens import EncryptedTokenAndSalt


@dataclass(frozen=True)
class StoreAccessTokenRecord:
    """
    Stored credentials for one store.

    SECURITY:
    - token holds ciphertext only
    - granted_authorities (OAuth scopes) and store_domain are safe to log
    """
    store_domain: str
    token: EncryptedTokenAndSalt = field(repr=False)
    granted_authorities: FrozenSet[str] = frozenset()
    token_type: str = "Bearer"
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.store_domain or not self.store_domain.strip():
            raise ValueError("store_domain is required")

    @property
    def encrypted_token(self) -> str:
        return self.token.encrypted_token

    @property
    def salt(self) -> str:
        return self.token.salt
