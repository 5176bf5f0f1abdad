"""
Snippetbox — Request Logging Middleware
=========================================

What:  One access-log line per HTTP request.
Why:   Shows who requested what, the outcome, and how long it took.
How:   Measures the handler, then logs method, path, status, duration,
       request ID and client IP at a level chosen by the status class.
When:  Inside RequestIDMiddleware (the request ID is already set) and
       SecureHeadersMiddleware (error responses still get the headers).

Log line:
    2026-10-19T12:00:00 [INFO] snippetbox.access: GET /snippet/view/1 200 4.2ms [a1b2c3d4] from 10.0.0.7

Not logged: form bodies (they carry passwords), cookies, query strings.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.access")

# Probed every few seconds by load balancers; logging them drowns real traffic
UNLOGGED_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with its response status and duration.

    Levels:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await self._call_app(request, call_next)

        start_time = time.perf_counter()
        client_ip = getattr(request.client, "host", "unknown") if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        response = await self._call_app(request, call_next)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response

    async def _call_app(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """
        Run the rest of the chain, turning an unhandled exception into a 500.

        The 500 then passes back out through the security-header and
        request-ID middlewares like any other response.
        """
        try:
            return await call_next(request)
        except Exception:
            logger.error(
                "[%s] Unhandled error on %s %s",
                request_id_var.get(""),
                request.method,
                request.url.path,
                exc_info=True,
            )
            return PlainTextResponse("Internal Server Error", status_code=500)
