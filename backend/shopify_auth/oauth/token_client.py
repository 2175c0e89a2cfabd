"""
Authorization-code token exchange for Shopify stores.

Two layers:
- HttpxAuthorizationCodeTokenResponseClient performs the literal
  code-for-token POST against whatever token URI its registration names.
- ShopifyAuthorizationCodeTokenResponseClient resolves the store-specific
  token URI from the shop carried in the authorization request, delegates
  the exchange, and republishes the shop on the token response so the
  identity stage can tell which store the token belongs to.

No retries are performed here. HTTP failures surface as httpx exceptions
and end the current login attempt.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import httpx

from shopify_auth.config.shopify import DEFAULT_TOKEN_EXCHANGE_TIMEOUT_SECONDS
from shopify_auth.integrations.shopify.webhooks import is_valid_shop_domain
from shopify_auth.oauth.models import (
    AccessTokenResponse,
    AuthorizationCodeGrantRequest,
    ClientAuthenticationMethod,
    OAuth2AccessToken,
    expand_uri_template,
)
from shopify_auth.oauth.parameters import (
    AdditionalParameters,
    ParameterKey,
    SHOP_PARAMETER,
)
from shopify_auth.platform.errors import (
    InvalidTenantIdentifierError,
    MissingTenantIdentifierError,
    TokenExchangeError,
)

logger = logging.getLogger(__name__)

# Standard token response fields; everything else is an additional parameter
_STANDARD_FIELDS = frozenset({
    "access_token", "token_type", "expires_in", "refresh_token", "scope",
})

# Shopify separates scopes with commas, RFC 6749 with spaces
_SCOPE_SEPARATOR = re.compile(r"[,\s]+")


class AccessTokenResponseClient(ABC):
    """Capability to exchange an authorization code for an access token."""

    @abstractmethod
    def get_token_response(self, grant_request: AuthorizationCodeGrantRequest) -> AccessTokenResponse:
        """Perform the exchange described by grant_request."""
        pass


def convert_token_response(
    payload: Dict[str, Any],
    issued_at: Optional[datetime] = None,
) -> AccessTokenResponse:
    """
    Convert a token endpoint JSON body into an AccessTokenResponse.

    Shopify answers {"access_token": ..., "scope": "read_a,write_b"} without
    a token_type, so the type defaults to Bearer.

    Raises:
        TokenExchangeError: If the body is an OAuth2 error or lacks access_token
    """
    if "error" in payload:
        raise TokenExchangeError(
            payload.get("error_description") or "Token endpoint returned an error",
            error_code=str(payload["error"]),
        )

    token_value = payload.get("access_token")
    if not token_value:
        raise TokenExchangeError("Token endpoint response has no access_token")

    issued_at = issued_at or datetime.now(timezone.utc)
    expires_at = None
    expires_in = payload.get("expires_in")
    if expires_in is not None:
        try:
            expires_at = issued_at + timedelta(seconds=int(expires_in))
        except (TypeError, ValueError):
            raise TokenExchangeError("Token endpoint returned an invalid expires_in")

    raw_scope = payload.get("scope") or ""
    if not isinstance(raw_scope, str):
        raise TokenExchangeError("Token endpoint returned an invalid scope")
    scopes = frozenset(s for s in _SCOPE_SEPARATOR.split(raw_scope) if s)

    extras = {k: v for k, v in payload.items() if k not in _STANDARD_FIELDS}

    return AccessTokenResponse(
        access_token=OAuth2AccessToken(
            token_value=token_value,
            token_type=payload.get("token_type") or "Bearer",
            issued_at=issued_at,
            expires_at=expires_at,
            scopes=scopes,
        ),
        refresh_token=payload.get("refresh_token"),
        additional_parameters=AdditionalParameters(extras),
    )


class HttpxAuthorizationCodeTokenResponseClient(AccessTokenResponseClient):
    """
    Generic authorization_code grant over httpx.

    Posts the form-encoded grant to the registration's token_uri as-is; it
    knows nothing about per-store templates.
    """

    def __init__(
        self,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TOKEN_EXCHANGE_TIMEOUT_SECONDS,
    ):
        """
        Args:
            http_client: Client to send requests with; one is created when omitted
            timeout: Request timeout in seconds for a created client
        """
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def get_token_response(self, grant_request: AuthorizationCodeGrantRequest) -> AccessTokenResponse:
        """
        Exchange the authorization code at the registration's token URI.

        Raises:
            httpx.HTTPStatusError: If the token endpoint answers with an error status
            httpx.TransportError: If the token endpoint cannot be reached
            TokenExchangeError: If the response body is not a usable token response
        """
        registration = grant_request.client_registration
        exchange = grant_request.authorization_exchange

        form = {
            "grant_type": "authorization_code",
            "code": exchange.authorization_response.code,
        }
        redirect_uri = exchange.authorization_request.redirect_uri
        if redirect_uri:
            form["redirect_uri"] = redirect_uri

        auth = None
        if registration.client_authentication_method == ClientAuthenticationMethod.CLIENT_SECRET_BASIC:
            auth = (registration.client_id, registration.client_secret)
        else:
            form["client_id"] = registration.client_id
            form["client_secret"] = registration.client_secret

        try:
            response = self._http_client.post(
                registration.token_uri,
                data=form,
                headers={"Accept": "application/json"},
                auth=auth,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Token endpoint returned an error status",
                extra={
                    "registration_id": registration.registration_id,
                    "status_code": e.response.status_code,
                }
            )
            raise

        try:
            payload = response.json()
        except ValueError:
            raise TokenExchangeError("Token endpoint response is not valid JSON")

        if not isinstance(payload, dict):
            raise TokenExchangeError("Token endpoint response is not a JSON object")

        return convert_token_response(payload)


class ShopifyAuthorizationCodeTokenResponseClient(AccessTokenResponseClient):
    """
    Store-aware decorator around any AccessTokenResponseClient.

    Exchange steps:
    1. Read the shop from the authorization request's additional parameters
       and expand it into the registration's token URI template
    2. Delegate the exchange with a derived registration; the shared one is
       never modified
    3. Return a copy of the token response whose additional parameters carry
       the resolved shop, overriding anything the endpoint echoed back
    """

    def __init__(
        self,
        delegate: AccessTokenResponseClient,
        shop_parameter: ParameterKey[str] = SHOP_PARAMETER,
        shop_validator: Optional[Callable[[str], bool]] = is_valid_shop_domain,
    ):
        """
        Args:
            delegate: Client performing the actual exchange
            shop_parameter: Key of the shop in the authorization request
            shop_validator: Check applied to the shop before it becomes a
                token URI host; None disables it
        """
        self._delegate = delegate
        self._shop_parameter = shop_parameter
        self._shop_validator = shop_validator

    def _shop_from(self, grant_request: AuthorizationCodeGrantRequest) -> str:
        request = grant_request.authorization_exchange.authorization_request
        shop = request.additional_parameters.value(self._shop_parameter)
        if not shop:
            logger.error(
                "Shop not found in the authorization request",
                extra={"parameter": self._shop_parameter.name}
            )
            raise MissingTenantIdentifierError(self._shop_parameter.name)

        # Client credentials are posted to this host
        if self._shop_validator is not None and not self._shop_validator(shop):
            logger.error(
                "Invalid shop in the authorization request",
                extra={"parameter": self._shop_parameter.name}
            )
            raise InvalidTenantIdentifierError(self._shop_parameter.name)
        return shop

    def get_token_response(self, grant_request: AuthorizationCodeGrantRequest) -> AccessTokenResponse:
        """
        Raises:
            MissingTenantIdentifierError: If the request carries no shop; no
                network call is made
            InvalidTenantIdentifierError: If the shop fails validation; no
                network call is made
        """
        shop = self._shop_from(grant_request)
        registration = grant_request.client_registration
        token_uri = expand_uri_template(
            registration.token_uri,
            {self._shop_parameter.name: shop},
        )

        store_request = AuthorizationCodeGrantRequest(
            client_registration=registration.with_token_uri(token_uri),
            authorization_exchange=grant_request.authorization_exchange,
        )

        logger.debug("Exchanging code for token with Shopify", extra={"shop": shop})

        response = self._delegate.get_token_response(store_request)

        logger.debug("Obtained Shopify response for token", extra={"shop": shop})

        return response.with_additional_parameters(
            response.additional_parameters.with_value(self._shop_parameter, shop)
        )
