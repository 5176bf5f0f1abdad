"""
Snippetbox — Snippet Route Handlers
=====================================

What:  Home page, snippet view page, and the create form.
How:   Thin handlers: validate input, call SnippetService, render or redirect.

Routes:
    GET  /                    latest ten snippets
    GET  /snippet/view/{id}   one snippet (404 when missing, expired or id < 1)
    GET  /snippet/create      empty form            (login required)
    POST /snippet/create      validate → insert → 303 to the new snippet (login required)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from snippetbox.auth import authenticated_user_id, require_authentication
from snippetbox.database import get_db_session
from snippetbox.exceptions import NoRecordError
from snippetbox.schemas.forms import SnippetForm, validate_form
from snippetbox.services.snippet_service import snippet_service
from snippetbox.templates import put_flash, render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Snippets"])


def parse_snippet_id(raw: str) -> int:
    """
    Convert the path segment to a positive id.

    Raises:
        NoRecordError: not an integer, or less than 1
    """
    try:
        snippet_id = int(raw)
    except ValueError:
        raise NoRecordError(resource="snippet", resource_id=raw)
    if snippet_id < 1:
        raise NoRecordError(resource="snippet", resource_id=raw)
    return snippet_id


@router.get("/", name="home")
async def home(
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    snippets = await snippet_service.latest(db)
    return render(request, "home.html", {"snippets": snippets})


@router.get("/snippet/view/{snippet_id}", name="snippet_view")
async def snippet_view(
    snippet_id: str,
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """NoRecordError from parsing or lookup becomes a 404 via the global handler."""
    snippet = await snippet_service.get(db, parse_snippet_id(snippet_id))
    return render(request, "view.html", {"snippet": snippet})


@router.get("/snippet/create", name="snippet_create")
async def snippet_create(
    request: Request,
    user_id: int = Depends(require_authentication),
) -> Response:
    # One year is preselected in the form
    return render(request, "create.html", {"form": {"expires": 365}, "errors": {}})


@router.post("/snippet/create", name="snippet_create_post")
async def snippet_create_post(
    request: Request,
    user_id: int = Depends(require_authentication),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    data = await request.form()
    form, errors = validate_form(SnippetForm, data)
    if form is None:
        return render(
            request,
            "create.html",
            {"form": dict(data), "errors": errors},
            status_code=422,
        )

    snippet_id = await snippet_service.insert(db, form.title, form.content, form.expires)
    put_flash(request, "Snippet successfully created!")
    return RedirectResponse(f"/snippet/view/{snippet_id}", status_code=303)
