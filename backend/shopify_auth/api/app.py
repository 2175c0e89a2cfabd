"""
FastAPI application factory.

The token service is built by the caller and attached to application
state, where route dependencies pick it up.
"""

from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from shopify_auth.api.routes import webhooks_shopify
from shopify_auth.platform.errors import ErrorHandlerMiddleware, http_exception_handler
from shopify_auth.services.token_service import TokenService


def create_app(token_service: TokenService, shopify_api_secret: Optional[str] = None) -> FastAPI:
    """
    Build the web application.

    Args:
        token_service: Service handling store credentials
        shopify_api_secret: Secret for webhook signatures (SHOPIFY_API_SECRET env var if omitted)
    """
    app = FastAPI(title="Shopify store authorization")
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(webhooks_shopify.router)

    app.state.token_service = token_service
    app.state.shopify_api_secret = shopify_api_secret

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
