"""Security headers middleware for KeyBastion.

Adds browser security headers to every response and marks responses that
can carry secrets or tokens as non-cacheable.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import RedirectResponse

from keybastion.core.config import get_settings
from keybastion.core.logging import get_logger

logger = get_logger(__name__)

NO_STORE_PATH_SEGMENTS = ("/auth/", "/credential-security/", "/passwords/")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options, X-Frame-Options, Referrer-Policy
    - Strict-Transport-Security (production only)
    - Content-Security-Policy and Permissions-Policy from settings
    - Cache-Control: no-store on auth, password and PIN gate responses
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        settings = get_settings()

        if not settings.security_headers_enabled:
            return await call_next(request)

        if (
            settings.is_production
            and settings.https_redirect_enabled
            and request.url.scheme == "http"
        ):
            https_url = request.url.replace(scheme="https")
            logger.info("Redirecting HTTP to HTTPS", path=request.url.path)
            return RedirectResponse(url=str(https_url), status_code=301)

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.hsts_max_age}; includeSubDomains"
            )

        response.headers["Content-Security-Policy"] = settings.csp_policy
        response.headers["Permissions-Policy"] = settings.permissions_policy

        if any(segment in request.url.path for segment in NO_STORE_PATH_SEGMENTS):
            response.headers.setdefault("Cache-Control", "no-store")
            response.headers.setdefault("Pragma", "no-cache")

        return response
