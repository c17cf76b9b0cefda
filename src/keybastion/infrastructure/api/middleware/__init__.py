"""HTTP middleware package."""

from keybastion.infrastructure.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)

__all__ = ["SecurityHeadersMiddleware"]
