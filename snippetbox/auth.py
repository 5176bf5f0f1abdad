"""
Snippetbox — Session Authentication Dependencies
==================================================

What:  Resolves who (if anyone) is logged in and guards protected routes.
Why:   The session cookie only proves a user id was stored at login; the
       account may have been deleted since. Each request re-checks it.
How:   FastAPI dependencies:
       - authenticated_user_id: reads the session, confirms the user exists,
         and records the result on request.state for templates
       - require_authentication: raises AuthenticationRequired for anonymous
         requests (handled in main.py as a 303 to /user/login)
Who:   Attached to every page route; require_authentication only to the
       create/logout routes.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import get_db_session
from snippetbox.exceptions import AuthenticationRequired
from snippetbox.services.user_service import user_service

logger = logging.getLogger(__name__)

# Session key holding the logged-in user's id
SESSION_USER_KEY = "authenticated_user_id"


def login(request: Request, user_id: int) -> None:
    """
    Store the user id in a fresh session.

    Clearing first drops anything stored before authentication, so data
    planted in an anonymous session doesn't carry over into the logged-in one.
    The signed cookie is re-issued with the new contents on the response.
    """
    request.session.clear()
    request.session[SESSION_USER_KEY] = user_id


def logout(request: Request) -> None:
    request.session.pop(SESSION_USER_KEY, None)


async def authenticated_user_id(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[int]:
    """
    Return the logged-in user's id, or None.

    A session pointing at a user that no longer exists is cleaned up and
    treated as anonymous.
    """
    request.state.is_authenticated = False
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        return None

    if not await user_service.exists(db, user_id):
        logger.info("Session references missing user %s; clearing", user_id)
        logout(request)
        return None

    request.state.is_authenticated = True
    return user_id


async def require_authentication(
    request: Request,
    user_id: Optional[int] = Depends(authenticated_user_id),
) -> int:
    """Guard for routes that need a logged-in user."""
    if user_id is None:
        raise AuthenticationRequired(path=request.url.path)
    return user_id
