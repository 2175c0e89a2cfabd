"""
OAuth2 authorization-code support for per-shop Shopify token endpoints.

Every Shopify store has its own token endpoint, so the generic client
registration carries URI templates that are expanded with the shop domain
at exchange time.
"""

from shopify_auth.oauth.parameters import (
    ParameterKey,
    AdditionalParameters,
    SHOP_PARAMETER,
)
from shopify_auth.oauth.models import (
    ClientAuthenticationMethod,
    ClientRegistration,
    OAuth2AccessToken,
    AuthorizedClient,
    AuthenticationToken,
    AuthorizationRequest,
    AuthorizationResponse,
    AuthorizationExchange,
    AuthorizationCodeGrantRequest,
    AccessTokenResponse,
    expand_uri_template,
)
from shopify_auth.oauth.registration import (
    SHOPIFY_REGISTRATION_ID,
    ClientRegistrationRepository,
    InMemoryClientRegistrationRepository,
    build_shopify_registration,
)
from shopify_auth.oauth.token_client import (
    AccessTokenResponseClient,
    HttpxAuthorizationCodeTokenResponseClient,
    ShopifyAuthorizationCodeTokenResponseClient,
)

__all__ = [
    # Parameters
    "ParameterKey",
    "AdditionalParameters",
    "SHOP_PARAMETER",
    # Models
    "ClientAuthenticationMethod",
    "ClientRegistration",
    "OAuth2AccessToken",
    "AuthorizedClient",
    "AuthenticationToken",
    "AuthorizationRequest",
    "AuthorizationResponse",
    "AuthorizationExchange",
    "AuthorizationCodeGrantRequest",
    "AccessTokenResponse",
    "expand_uri_template",
    # Registration
    "SHOPIFY_REGISTRATION_ID",
    "ClientRegistrationRepository",
    "InMemoryClientRegistrationRepository",
    "build_shopify_registration",
    # Token exchange
    "AccessTokenResponseClient",
    "HttpxAuthorizationCodeTokenResponseClient",
    "ShopifyAuthorizationCodeTokenResponseClient",
]
