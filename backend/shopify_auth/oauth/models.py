"""
OAuth2 value types shared by the token exchange and the token lifecycle.

All types are immutable. Deriving a variant (a registration with a resolved
token URI, a token response with extra parameters) produces a new value and
leaves the original untouched, since registrations are shared by every shop.

SECURITY:
- client_secret and token values are excluded from repr()
"""

import enum
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import FrozenSet, Mapping, Optional
from urllib.parse import quote

from shopify_auth.oauth.parameters import AdditionalParameters

_TEMPLATE_VARIABLE = re.compile(r"\{([^{}]+)\}")


class ClientAuthenticationMethod(str, enum.Enum):
    """How client credentials are presented to the token endpoint."""
    CLIENT_SECRET_POST = "client_secret_post"  # Shopify default
    CLIENT_SECRET_BASIC = "client_secret_basic"


def expand_uri_template(template: str, variables: Mapping[str, str]) -> str:
    """
    Substitute {name} placeholders in a URI template.

    Values are percent-encoded, so a shop domain cannot inject path segments.

    Raises:
        ValueError: If the template references a variable that was not supplied
    """
    def _substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in variables:
            raise ValueError(f"No value supplied for URI template variable '{name}'")
        return quote(str(variables[name]), safe="")

    return _TEMPLATE_VARIABLE.sub(_substitute, template)


@dataclass(frozen=True)
class ClientRegistration:
    """
    OAuth2 client configuration for a provider.

    For Shopify the authorization and token URIs are templates containing
    a {shop} placeholder; one registration serves every installed store.
    """
    registration_id: str
    client_id: str
    client_secret: str = field(repr=False)
    authorization_uri: str
    token_uri: str
    redirect_uri_template: str
    scopes: FrozenSet[str] = frozenset()
    client_authentication_method: ClientAuthenticationMethod = ClientAuthenticationMethod.CLIENT_SECRET_POST
    authorization_grant_type: str = "authorization_code"
    client_name: Optional[str] = None

    def with_token_uri(self, token_uri: str) -> "ClientRegistration":
        """Return a copy identical to this registration except for token_uri."""
        return replace(self, token_uri=token_uri)


@dataclass(frozen=True)
class OAuth2AccessToken:
    """An issued access token. Shopify offline tokens have no expiry."""
    token_value: str = field(repr=False)
    token_type: str = "Bearer"
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    scopes: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class AuthorizedClient:
    """A client registration authorized by a principal (the shop)."""
    client_registration: ClientRegistration
    principal_name: str
    access_token: OAuth2AccessToken


@dataclass(frozen=True)
class AuthenticationToken:
    """
    Authenticated principal produced by the OAuth2 login.

    name is the shop domain of the installing store.
    """
    name: str
    authorities: FrozenSet[str] = frozenset()
    authorized_client_registration_id: Optional[str] = None


@dataclass(frozen=True)
class AuthorizationRequest:
    """The authorization request sent to the provider, as remembered by the client."""
    authorization_uri: str
    client_id: str
    redirect_uri: Optional[str] = None
    scopes: FrozenSet[str] = frozenset()
    state: Optional[str] = None
    additional_parameters: AdditionalParameters = field(default_factory=AdditionalParameters)


@dataclass(frozen=True)
class AuthorizationResponse:
    """The provider's redirect back to the client."""
    code: str = field(repr=False)
    redirect_uri: Optional[str] = None
    state: Optional[str] = None


@dataclass(frozen=True)
class AuthorizationExchange:
    authorization_request: AuthorizationRequest
    authorization_response: AuthorizationResponse


@dataclass(frozen=True)
class AuthorizationCodeGrantRequest:
    """Everything needed to trade an authorization code for a token."""
    client_registration: ClientRegistration
    authorization_exchange: AuthorizationExchange


@dataclass(frozen=True)
class AccessTokenResponse:
    """Parsed token endpoint response."""
    access_token: OAuth2AccessToken
    refresh_token: Optional[str] = field(default=None, repr=False)
    additional_parameters: AdditionalParameters = field(default_factory=AdditionalParameters)

    def with_additional_parameters(self, parameters: AdditionalParameters) -> "AccessTokenResponse":
        """Return a copy carrying parameters instead of the current ones."""
        return replace(self, additional_parameters=parameters)
