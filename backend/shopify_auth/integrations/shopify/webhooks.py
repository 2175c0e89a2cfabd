"""
Shopify webhook verification helpers.

Shopify signs every webhook body with the app's API secret and sends the
base64 HMAC-SHA256 digest in X-Shopify-Hmac-Sha256.
"""

import base64
import hashlib
import hmac
import logging
import os
import re
from typing import Optional

logger = logging.getLogger(__name__)

_SHOP_DOMAIN_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*\.myshopify\.com$")


def verify_webhook_signature(
    payload: bytes,
    signature: Optional[str],
    secret: Optional[str] = None,
) -> bool:
    """
    Verify Shopify webhook HMAC signature.

    Args:
        payload: Raw request body bytes
        signature: X-Shopify-Hmac-Sha256 header value
        secret: Webhook secret (uses SHOPIFY_API_SECRET env var if not provided)

    Returns:
        True if signature is valid
    """
    secret = secret or os.getenv("SHOPIFY_API_SECRET")
    if not secret:
        logger.error("SHOPIFY_API_SECRET not configured for webhook verification")
        return False
    if not signature:
        return False

    computed_hmac = hmac.new(
        secret.encode("utf-8"),
        payload,
        hashlib.sha256,
    ).digest()
    computed_signature = base64.b64encode(computed_hmac).decode("utf-8")

    return hmac.compare_digest(computed_signature, signature)


def is_valid_shop_domain(shop_domain: Optional[str]) -> bool:
    """True for lowercase <name>.myshopify.com domains."""
    if not shop_domain:
        return False
    return bool(_SHOP_DOMAIN_PATTERN.match(shop_domain))
