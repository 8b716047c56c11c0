"""Security Headers Middleware

The storefront calls this API from the browser, so the basic headers are on
by default. HSTS only makes sense behind HTTPS and CSP is opt-in.

Responses that carry customer data (carts, orders, partner applications,
user accounts) are additionally marked as not cacheable.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import config

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    # The API never needs device features
    "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=(), usb=()",
}

HSTS_VALUE = "max-age=31536000; includeSubDomains"

# JSON only, nothing to load, frame or submit
CSP_VALUE = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'; form-action 'none'"

PRIVATE_PREFIXES = (
    "/api/cart", "/api/orders", "/api/partners", "/api/users", "/api/quotes", "/api/user/", "/api/admin/",
)


def is_private_path(path: str) -> bool:
    """True for customer-data endpoints. Public order tracking is excluded."""
    if path.startswith("/api/orders/track/"):
        return False
    return path.startswith(PRIVATE_PREFIXES)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the hardening headers plus no-store on customer data."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        if not config.SECURITY_HEADERS_ENABLED:
            return response

        for name, value in BASE_HEADERS.items():
            response.headers[name] = value

        if config.HSTS_ENABLED:
            response.headers["Strict-Transport-Security"] = HSTS_VALUE

        if is_private_path(request.url.path):
            response.headers["Cache-Control"] = "no-store"

        return response


class CSPMiddleware(BaseHTTPMiddleware):
    """Content Security Policy for API responses, enabled with CSP_ENABLED."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        if config.CSP_ENABLED:
            response.headers["Content-Security-Policy"] = CSP_VALUE
        return response
