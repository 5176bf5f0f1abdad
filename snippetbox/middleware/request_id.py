"""
Snippetbox — Request ID Middleware
====================================

What:  Assigns an ID to each incoming request and echoes it in the response.
Why:   Correlates the access log line and any error log lines of one request.
How:   Reuses a client-provided X-Request-ID when it is short and made of
       safe characters, otherwise generates 8 hex characters; stores it in a
       ContextVar and on request.state.
When:  Outermost middleware, so every later log line carries the ID.
"""

import re
import secrets
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Client IDs end up verbatim in log lines: no spaces, newlines or control chars
_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(supplied: Optional[str]) -> str:
    """Return the client's ID if acceptable, else a fresh one."""
    if supplied and _VALID_REQUEST_ID.fullmatch(supplied):
        return supplied
    return secrets.token_hex(4)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Sets request_id_var / request.state.request_id and the X-Request-ID header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
