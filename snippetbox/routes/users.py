"""
Snippetbox — User Route Handlers
==================================

What:  Signup, login and logout.

Routes:
    GET  /user/signup   signup form
    POST /user/signup   validate → create account → 303 to /user/login
    GET  /user/login    login form
    POST /user/login    authenticate → fresh session → 303 to /snippet/create
    POST /user/logout   forget the user → 303 to /   (login required)

Failed validation, duplicate emails and bad credentials re-render the form
with HTTP 422. Passwords are never echoed back into the form.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from snippetbox import auth
from snippetbox.auth import authenticated_user_id, require_authentication
from snippetbox.database import get_db_session
from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError
from snippetbox.schemas.forms import NON_FIELD, LoginForm, SignupForm, validate_form
from snippetbox.services.user_service import user_service
from snippetbox.templates import put_flash, render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"])


def _redisplay(data, *fields: str) -> dict:
    return {field: data.get(field, "") for field in fields}


@router.get("/signup", name="user_signup")
async def user_signup(
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
) -> Response:
    return render(request, "signup.html", {"form": {}, "errors": {}})


@router.post("/signup", name="user_signup_post")
async def user_signup_post(
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    data = await request.form()
    form, errors = validate_form(SignupForm, data)
    if form is None:
        return render(
            request,
            "signup.html",
            {"form": _redisplay(data, "name", "email"), "errors": errors},
            status_code=422,
        )

    try:
        await user_service.insert(
            db,
            form.name,
            form.email,
            form.password,
            rounds=request.app.state.settings.bcrypt_rounds,
        )
    except DuplicateEmailError as e:
        return render(
            request,
            "signup.html",
            {"form": _redisplay(data, "name", "email"), "errors": {"email": e.message}},
            status_code=422,
        )

    put_flash(request, "Your signup was successful. Please log in.")
    return RedirectResponse("/user/login", status_code=303)


@router.get("/login", name="user_login")
async def user_login(
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
) -> Response:
    return render(request, "login.html", {"form": {}, "errors": {}})


@router.post("/login", name="user_login_post")
async def user_login_post(
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    data = await request.form()
    form, errors = validate_form(LoginForm, data)
    if form is None:
        return render(
            request,
            "login.html",
            {"form": _redisplay(data, "email"), "errors": errors},
            status_code=422,
        )

    try:
        new_user_id = await user_service.authenticate(db, form.email, form.password)
    except InvalidCredentialsError as e:
        logger.info("Failed login attempt")
        return render(
            request,
            "login.html",
            {"form": _redisplay(data, "email"), "errors": {NON_FIELD: e.message}},
            status_code=422,
        )

    auth.login(request, new_user_id)
    logger.info("User %d logged in", new_user_id)
    return RedirectResponse("/snippet/create", status_code=303)


@router.post("/logout", name="user_logout")
async def user_logout(
    request: Request,
    user_id: int = Depends(require_authentication),
) -> Response:
    auth.logout(request)
    put_flash(request, "You've been logged out successfully!")
    return RedirectResponse("/", status_code=303)
