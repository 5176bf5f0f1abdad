"""
Snippetbox — Security Headers Middleware
==========================================

What:  Adds browser security headers to every response.
Why:   The pages render user-supplied snippet content; these headers limit
       what a browser will do with a page even if escaping ever failed.
How:   Starlette BaseHTTPMiddleware that sets headers after the handler runs.

Headers:
    Content-Security-Policy   only same-origin scripts/styles, fonts from Google
    Referrer-Policy           send origin only, and never on HTTPS→HTTP
    X-Content-Type-Options    no MIME sniffing
    X-Frame-Options           no framing (clickjacking)
    X-XSS-Protection: 0       disable the legacy filter; CSP supersedes it
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' fonts.googleapis.com; font-src fonts.gstatic.com"
    ),
    "Referrer-Policy": "origin-when-cross-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "deny",
    "X-XSS-Protection": "0",
}


class SecureHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
