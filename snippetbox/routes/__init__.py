# Routes package init
"""
Snippetbox — Routes Package
=============================

What:  HTTP route handlers. Basic path dispatch only; no custom router.

Route Inventory:
    - snippets.py:  GET /, GET /snippet/view/{id}, GET|POST /snippet/create
    - users.py:     GET|POST /user/signup, GET|POST /user/login, POST /user/logout
    - health.py:    GET /health
    Static assets are mounted at /static by the application factory.

Design Principle:
    Routes stay thin: read the request, call a service, render a template or
    redirect. SQL lives in services; markup lives in templates.
"""
