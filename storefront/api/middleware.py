"""API middleware for the storefront catalog.

Provides:
- Request ID correlation
- Admin key authentication
- Error handling
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.api.schemas import error_content
from storefront.infrastructure.config import settings

logger = structlog.get_logger()


# ============================================================================
# Request ID Middleware
# ============================================================================


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID for correlation.

    Generates or extracts a request ID and adds it to:
    - Request state for access in handlers
    - Response headers for client correlation
    - Log context for tracing
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request with correlation ID.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response with request ID header.
        """
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid4())
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        start_time = time.perf_counter()

        response: Response | None = None
        try:
            response = await call_next(request)
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000

            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=getattr(response, "status_code", 500),
                duration_ms=round(duration_ms, 2),
            )

            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[self.HEADER_NAME] = request_id
        return response


# ============================================================================
# Admin Key Authentication Middleware
# ============================================================================


API_PREFIX = "/api"
SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}

# Public listing routes living next to the admin-only /api/products/{id}
PUBLIC_PRODUCT_SEGMENTS = {"search", "best-selling", "featured", "filters"}


def requires_admin(method: str, path: str) -> bool:
    """Whether a request must carry the admin key.

    Every write under ``/api`` is admin-only. Among reads only the
    product-by-id detail and the status lookup are.
    """
    path = path.rstrip("/")
    if path != API_PREFIX and not path.startswith(API_PREFIX + "/"):
        return False
    if method.upper() not in SAFE_METHODS:
        return True

    parts = path.split("/")[2:]
    if parts[:1] == ["product-statuses"]:
        return True
    return (
        len(parts) == 2
        and parts[0] == "products"
        and parts[1] not in PUBLIC_PRODUCT_SEGMENTS
    )


def _unauthorized(message: str, code: str = "UNAUTHORIZED") -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=error_content(code, message),
        headers={"WWW-Authenticate": "Bearer"},
    )


class AdminKeyMiddleware(BaseHTTPMiddleware):
    """Middleware for admin API key authentication.

    Validates the Authorization header of admin requests.
    Supports Bearer token format: "Authorization: Bearer <api_key>"
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Validate the admin key for protected endpoints.

        Args:
            request: Incoming request.
            call_next: Next middleware/handler.

        Returns:
            Response or 401 error.
        """
        path = request.url.path
        if not requires_admin(request.method, path):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            logger.warning("Missing authorization header", path=path, method=request.method)
            return _unauthorized("Missing Authorization header")

        parts = auth_header.split(" ", 1)
        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("Invalid authorization format", path=path, method=request.method)
            return _unauthorized("Invalid Authorization header format. Use 'Bearer <api_key>'")

        if parts[1] != settings.admin_api_key:
            logger.warning("Invalid API key", path=path, method=request.method)
            return _unauthorized("Invalid API key", code="INVALID_API_KEY")

        request.state.authenticated = True
        return await call_next(request)


# ============================================================================
# Error Handling Middleware
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for consistent error handling.

    Catches unhandled exceptions and returns the standard error envelope.
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error=str(e),
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=error_content("INTERNAL_ERROR", "Internal server error"),
            )


# ============================================================================
# Middleware Setup
# ============================================================================


def setup_middleware(app: FastAPI) -> None:
    """Configure all middleware for the application.

    The last middleware added runs first.

    Args:
        app: FastAPI application instance.
    """
    # Innermost: turns unhandled errors into envelopes
    app.add_middleware(ErrorHandlerMiddleware)

    app.add_middleware(AdminKeyMiddleware)

    # Outermost: every response, including 401s and 500s, gets a request ID
    app.add_middleware(RequestIdMiddleware)
