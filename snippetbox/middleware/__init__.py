# Middleware package init
"""
Snippetbox — Middleware Package
=================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Secure Headers] → [Session] → Route Handler

    1. Request ID: correlation ID for the log line and error logs
    2. Logging: records status and duration of everything inside it
    3. Secure Headers: applied to every response, including error pages
    4. Session: Starlette's SessionMiddleware decodes/re-signs the cookie
"""
