from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; base-uri 'self'; font-src 'self' https: data:; form-action 'self'; "
    "frame-ancestors 'self'; img-src 'self' data:; object-src 'none'; script-src 'self'; "
    "script-src-attr 'none'; style-src 'self' https: 'unsafe-inline'; upgrade-insecure-requests"
)


def apply_security_headers(response, *, production: bool = False):  # type: ignore[no-untyped-def]
    """Set the baseline hardening headers that the response does not already carry."""
    h = response.headers
    h.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
    h.setdefault("Cross-Origin-Opener-Policy", "same-origin")
    h.setdefault("Cross-Origin-Resource-Policy", "same-origin")
    h.setdefault("Referrer-Policy", "no-referrer")
    h.setdefault("X-Content-Type-Options", "nosniff")
    h.setdefault("X-DNS-Prefetch-Control", "off")
    h.setdefault("X-Frame-Options", "SAMEORIGIN")
    if production:
        h.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
    return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Baseline browser hardening headers. Routes may override any of them."""

    def __init__(self, app, *, production: bool = False) -> None:  # type: ignore[no-untyped-def]
        super().__init__(app)
        self.production = production

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        return apply_security_headers(response, production=self.production)
