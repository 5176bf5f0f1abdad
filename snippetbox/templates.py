"""
Snippetbox — Template Cache & Rendering
=========================================

What:  Builds the Jinja2 environment, precompiles every page, and renders
       pages with the default template data.
Why:   A template error should stop the server at startup, not surface as a
       500 on the first request that happens to use the broken page.
How:   build_templates() loads each page once; Jinja2 keeps compiled templates
       in its own cache (cache_size=-1, never evicted) for every later render.
Who:   Called by the application factory; render() is called by route handlers.

Layout:
    html/
    ├── base.html           layout every page extends
    ├── partials/nav.html   navigation, included by base.html
    └── pages/*.html        one file per page
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

PAGES = ("home.html", "view.html", "create.html", "signup.html", "login.html")

# Session key for the one-shot flash message
FLASH_KEY = "flash"


def human_date(value: Optional[datetime]) -> str:
    """
    Format a UTC datetime as '02 Jan 2006 at 15:04'.

    Naive datetimes are treated as UTC (that's how the database stores them).
    Returns an empty string for None.
    """
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%d %b %Y at %H:%M")


def build_templates(templates_dir: str) -> Jinja2Templates:
    """
    Create the template cache.

    Raises:
        FileNotFoundError: templates_dir does not exist
        jinja2.TemplateError: a page (or anything it extends/includes) is
            missing or fails to compile
    """
    root = Path(templates_dir)
    if not root.is_dir():
        raise FileNotFoundError(f"Template directory '{templates_dir}' does not exist")

    env = Environment(
        loader=FileSystemLoader(str(root)),
        autoescape=select_autoescape(["html"]),
        cache_size=-1,
        # Compiled once; template edits need a restart
        auto_reload=False,
    )
    env.filters["human_date"] = human_date

    for page in PAGES:
        try:
            env.get_template(f"pages/{page}")
        except TemplateError:
            logger.error("Failed to compile template pages/%s", page)
            raise

    logger.info("Template cache built: %d pages from %s", len(PAGES), root.resolve())
    return Jinja2Templates(env=env)


def pop_flash(request: Request) -> str:
    return request.session.pop(FLASH_KEY, "")


def put_flash(request: Request, message: str) -> None:
    request.session[FLASH_KEY] = message


def default_data(request: Request) -> Dict[str, Any]:
    """Data every page receives: current year, flash message, auth flag."""
    return {
        "current_year": datetime.now(timezone.utc).year,
        "flash": pop_flash(request),
        "is_authenticated": bool(getattr(request.state, "is_authenticated", False)),
    }


def render(
    request: Request,
    page: str,
    data: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> Response:
    """
    Render pages/<page> with the default data merged under `data`.

    Authenticated pages are sent with Cache-Control: no-store so a shared
    browser's back button can't show them after logout.
    """
    templates: Jinja2Templates = request.app.state.templates
    context = default_data(request)
    context.update(data or {})
    response = templates.TemplateResponse(
        request, f"pages/{page}", context, status_code=status_code
    )
    if context["is_authenticated"]:
        response.headers["Cache-Control"] = "no-store"
    return response
