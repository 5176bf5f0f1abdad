"""
Snippetbox — User Service (Accounts & Credentials)
====================================================

What:  Account creation, credential checks, and existence lookups.
Why:   Session authentication needs to create users, verify passwords at login,
       and confirm on every request that the session's user still exists.
How:   Passwords are hashed with bcrypt. Hashing is CPU-bound (hundreds of ms
       at the default cost), so it runs in Starlette's threadpool to keep the
       event loop responsive.
Who:   Called by the user route handlers and the authentication dependency.
"""

import logging

import bcrypt
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from snippetbox.database import utc_now
from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError
from snippetbox.models.user import User

logger = logging.getLogger(__name__)


def hash_password(password: str, rounds: int = 12) -> str:
    """Return the bcrypt hash of `password` as a 60-character ASCII string."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def check_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("ascii"))


def _is_duplicate_email(exc: IntegrityError) -> bool:
    # MySQL names the constraint; SQLite names the column
    message = str(exc.orig)
    return "users_uc_email" in message or "users.email" in message


class UserService:
    """Data-access object for user accounts. Stateless, like SnippetService."""

    async def insert(
        self,
        db: AsyncSession,
        name: str,
        email: str,
        password: str,
        rounds: int = 12,
    ) -> int:
        """
        Create a user and return the new id.

        Raises:
            DuplicateEmailError: The email address is already registered.
                The session is rolled back first so the request can still
                render a response.
        """
        hashed = await run_in_threadpool(hash_password, password, rounds)
        user = User(name=name, email=email, hashed_password=hashed, created=utc_now())
        db.add(user)
        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            if _is_duplicate_email(e):
                logger.info("Signup rejected: duplicate email")
                raise DuplicateEmailError(email=email)
            raise
        logger.info("User %d created", user.id)
        return user.id

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> int:
        """
        Verify credentials and return the user's id.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        result = await db.execute(
            select(User.id, User.hashed_password).where(User.email == email)
        )
        row = result.one_or_none()
        if row is None:
            raise InvalidCredentialsError()

        matches = await run_in_threadpool(check_password, password, row.hashed_password)
        if not matches:
            raise InvalidCredentialsError()
        return row.id

    async def exists(self, db: AsyncSession, user_id: int) -> bool:
        result = await db.execute(select(exists().where(User.id == user_id)))
        return bool(result.scalar())


user_service = UserService()
