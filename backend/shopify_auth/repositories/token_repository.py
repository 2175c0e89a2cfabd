"""
Persistence of StoreAccessTokenRecords.

TokenRepository is the storage contract used by the token service;
SqlAlchemyTokenRepository implements it on the shopify_store_access_tokens
table.

Each write commits on its own. Concurrent writes for the same store are
ordered by the database (last write wins); callers needing stronger
guarantees must serialize per store themselves.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shopify_auth.config.shopify import parse_scopes
from shopify_auth.credentials.records import StoreAccessTokenRecord
from shopify_auth.credentials.tokens import EncryptedTokenAndSalt
from shopify_auth.models.store_access_token import StoreAccessToken

logger = logging.getLogger(__name__)


class TokenRepository(ABC):
    """CRUD storage for store records keyed by shop domain."""

    @abstractmethod
    def find_by_store_domain(self, store_domain: str) -> Optional[StoreAccessTokenRecord]:
        """Return the record for store_domain, or None when not installed."""
        pass

    @abstractmethod
    def create(self, record: StoreAccessTokenRecord) -> None:
        """Persist a record for a newly installed store."""
        pass

    @abstractmethod
    def update(self, record: StoreAccessTokenRecord) -> bool:
        """
        Replace the stored record for record.store_domain.

        Returns:
            False when no record exists for the store; nothing is written
        """
        pass

    @abstractmethod
    def delete(self, store_domain: str) -> None:
        """Remove the record for store_domain, if any."""
        pass


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Some backends (SQLite) drop tzinfo on read
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _join_scopes(scopes) -> Optional[str]:
    return ",".join(sorted(scopes)) if scopes else None


class SqlAlchemyTokenRepository(TokenRepository):
    """TokenRepository backed by a SQLAlchemy session."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def _get_row(self, store_domain: str) -> Optional[StoreAccessToken]:
        stmt = select(StoreAccessToken).where(StoreAccessToken.store_domain == store_domain)
        return self.db.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _to_record(row: StoreAccessToken) -> StoreAccessTokenRecord:
        return StoreAccessTokenRecord(
            store_domain=row.store_domain,
            token=EncryptedTokenAndSalt(
                encrypted_token=row.access_token,
                salt=row.salt,
            ),
            granted_authorities=parse_scopes(row.scopes),
            token_type=row.token_type,
            issued_at=_as_utc(row.issued_at),
            expires_at=_as_utc(row.expires_at),
        )

    @staticmethod
    def _apply(row: StoreAccessToken, record: StoreAccessTokenRecord) -> None:
        row.store_domain = record.store_domain
        row.access_token = record.encrypted_token
        row.salt = record.salt
        row.token_type = record.token_type
        row.issued_at = record.issued_at
        row.expires_at = record.expires_at
        row.scopes = _join_scopes(record.granted_authorities)

    def _commit(self, operation: str, store_domain: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Store token write failed",
                extra={
                    "operation": operation,
                    "store_domain": store_domain,
                    "error_type": type(e).__name__,
                }
            )
            raise

    def find_by_store_domain(self, store_domain: str) -> Optional[StoreAccessTokenRecord]:
        if not store_domain:
            return None
        row = self._get_row(store_domain)
        if row is None:
            return None
        return self._to_record(row)

    def create(self, record: StoreAccessTokenRecord) -> None:
        row = StoreAccessToken()
        self._apply(row, record)
        self.db.add(row)
        self._commit("create", record.store_domain)

        logger.info(
            "Store token created",
            extra={"store_domain": record.store_domain, "scopes": sorted(record.granted_authorities)}
        )

    def update(self, record: StoreAccessTokenRecord) -> bool:
        row = self._get_row(record.store_domain)
        if row is None:
            logger.warning(
                "Store token update for unknown store ignored",
                extra={"store_domain": record.store_domain}
            )
            return False

        self._apply(row, record)
        self._commit("update", record.store_domain)

        logger.info(
            "Store token updated",
            extra={"store_domain": record.store_domain, "scopes": sorted(record.granted_authorities)}
        )
        return True

    def delete(self, store_domain: str) -> None:
        result = self.db.execute(
            delete(StoreAccessToken).where(StoreAccessToken.store_domain == store_domain)
        )
        self._commit("delete", store_domain)

        logger.info(
            "Store token deleted",
            extra={"store_domain": store_domain, "rows": result.rowcount}
        )
