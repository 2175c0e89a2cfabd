"""
Consistent error handling for Shopify store authorization.

Errors raised by the token lifecycle share one shape so the surrounding
web layer can render them without leaking internals.
Stack traces are NEVER returned to clients.

Standard HTTP status codes:
- 400: Bad Request (malformed authorization request)
- 401: Unauthorized (webhook signature failures)
- 500: Internal Server Error (deployment/configuration defects)
- 502: Bad Gateway (Shopify rejected the token exchange)
"""

import logging
import uuid
from typing import Any, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Base application error with consistent error shape.

    All custom errors should inherit from this class.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to API error response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class MissingTenantIdentifierError(AppError):
    """
    The authorization request carried no shop parameter (400).

    Raised before any network call; the upstream request resolver is
    misconfigured and the login flow must be restarted.
    """

    def __init__(self, parameter: str):
        super().__init__(
            code="MISSING_TENANT_IDENTIFIER",
            message=f"Parameter '{parameter}' not found in the authorization request",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"parameter": parameter},
        )


class InvalidTenantIdentifierError(AppError):
    """The shop parameter is not a valid store domain (400)."""

    def __init__(self, parameter: str):
        super().__init__(
            code="INVALID_TENANT_IDENTIFIER",
            message=f"Parameter '{parameter}' is not a valid store domain",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"parameter": parameter},
        )


class MissingRegistrationError(AppError):
    """No client registration for a known store (500) - deployment defect."""

    def __init__(self, registration_id: str):
        super().__init__(
            code="MISSING_CLIENT_REGISTRATION",
            message=f"No client registration found for '{registration_id}'",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"registration_id": registration_id},
        )


class ConfigurationError(AppError):
    """Required configuration is missing or invalid (500)."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class TokenExchangeError(AppError):
    """The token endpoint answered without a usable access token (502)."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        details = {}
        if error_code:
            details["oauth_error"] = error_code
        super().__init__(
            code="TOKEN_EXCHANGE_FAILED",
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )


def generate_correlation_id() -> str:
    """Generate a unique correlation ID for request tracing."""
    return str(uuid.uuid4())


def get_correlation_id(request: Request) -> str:
    """
    Get correlation ID from request or generate new one.

    Checks X-Correlation-ID header first, then request state.
    """
    correlation_id = request.headers.get("X-Correlation-ID")
    if correlation_id:
        return correlation_id

    if hasattr(request.state, "correlation_id"):
        return request.state.correlation_id

    return generate_correlation_id()


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches all exceptions and returns consistent error responses.

    IMPORTANT: Stack traces are NEVER returned to clients.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = get_correlation_id(request)
        request.state.correlation_id = correlation_id

        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except AppError as e:
            logger.warning(
                "Application error",
                extra={
                    "correlation_id": correlation_id,
                    "error_code": e.code,
                    "status_code": e.status_code,
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=e.status_code,
                content=e.to_dict(),
                headers={"X-Correlation-ID": correlation_id},
            )

        except Exception as e:
            # Full exception stays server-side
            logger.exception(
                "Unhandled exception",
                extra={
                    "correlation_id": correlation_id,
                    "error_type": type(e).__name__,
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": {
                        "code": "INTERNAL_ERROR",
                        "message": "An unexpected error occurred",
                        "details": {"correlation_id": correlation_id},
                    }
                },
                headers={"X-Correlation-ID": correlation_id},
            )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Render HTTPExceptions raised by routes in the AppError shape.

    Routes raise HTTPException for rejected webhooks (401/400/503); those are
    turned into responses inside the app, before ErrorHandlerMiddleware sees them.
    """
    correlation_id = get_correlation_id(request)

    logger.warning(
        "HTTP exception",
        extra={
            "correlation_id": correlation_id,
            "status_code": exc.status_code,
            "detail": exc.detail,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": "HTTP_ERROR",
                "message": str(exc.detail),
                "details": {},
            }
        },
        headers={"X-Correlation-ID": correlation_id},
    )
