"""
Shopify webhook handlers for app lifecycle events.

SECURITY:
- All webhooks MUST verify HMAC signature
- No authentication middleware (webhooks are from Shopify, not users)
- The store is taken from X-Shopify-Shop-Domain, never from the payload
"""

import logging

from fastapi import APIRouter, Request, HTTPException, status, Header

from shopify_auth.integrations.shopify.webhooks import (
    is_valid_shop_domain,
    verify_webhook_signature,
)
from shopify_auth.services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks/shopify", tags=["webhooks"])


async def verify_webhook(request: Request, x_shopify_hmac_sha256: str) -> bytes:
    """
    Verify Shopify webhook HMAC signature.

    Returns:
        Raw request body bytes

    Raises:
        HTTPException: If signature is invalid
    """
    body = await request.body()
    secret = getattr(request.app.state, "shopify_api_secret", None)

    if not verify_webhook_signature(body, x_shopify_hmac_sha256, secret):
        logger.warning("Invalid webhook signature", extra={
            "path": request.url.path,
        })
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature"
        )

    return body


def get_token_service(request: Request) -> TokenService:
    """Get the token service from application state."""
    token_service = getattr(request.app.state, "token_service", None)
    if token_service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token service not configured"
        )
    return token_service


@router.post("/app-uninstalled")
async def handle_app_uninstalled(
    request: Request,
    x_shopify_topic: str = Header(..., alias="X-Shopify-Topic"),
    x_shopify_shop_domain: str = Header(..., alias="X-Shopify-Shop-Domain"),
    x_shopify_hmac_sha256: str = Header(..., alias="X-Shopify-Hmac-Sha256"),
):
    """
    Handle app/uninstalled webhook.

    Deletes the store's stored access token; the token is already revoked
    on Shopify's side.
    """
    await verify_webhook(request, x_shopify_hmac_sha256)

    if not is_valid_shop_domain(x_shopify_shop_domain):
        logger.warning("Uninstall webhook with invalid shop domain", extra={
            "topic": x_shopify_topic,
        })
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid shop domain"
        )

    logger.info("Received app uninstalled webhook", extra={
        "topic": x_shopify_topic,
        "shop_domain": x_shopify_shop_domain,
    })

    token_service = get_token_service(request)

    try:
        token_service.uninstall_store(x_shopify_shop_domain)
    except Exception as e:
        logger.error("Failed to process uninstall webhook", extra={
            "topic": x_shopify_topic,
            "shop_domain": x_shopify_shop_domain,
            "error": str(e),
        })
        # Non-2xx makes Shopify redeliver; the record must not outlive the token
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Uninstall failed"
        )

    return {"status": "processed"}
