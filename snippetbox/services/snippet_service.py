"""
Snippetbox — Snippet Service (Data Access)
============================================

What:  The three snippet statements: insert, get-by-id, latest ten.
Why:   Keeps SQL out of the route handlers.
How:   Each method receives the request's AsyncSession and issues one
       parameterized statement. Expiry is always evaluated by the database
       clock (utc_now), never by the application.
Who:   Called by the snippet route handlers.

Error Handling:
    A missing or expired snippet is translated into NoRecordError.
    Every other driver error propagates untouched to the global handler.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import utc_days_from_now, utc_now
from snippetbox.exceptions import NoRecordError
from snippetbox.models.snippet import Snippet

logger = logging.getLogger(__name__)

# Number of snippets shown on the home page
LATEST_LIMIT = 10


class SnippetService:
    """
    Data-access object for snippets.

    Stateless: the session is passed to every call, so one instance serves
    all requests.
    """

    async def insert(
        self,
        db: AsyncSession,
        title: str,
        content: str,
        expires_days: int,
    ) -> int:
        """
        Insert a new snippet and return its id.

        Equivalent SQL (MySQL):
            INSERT INTO snippets (title, content, created, expires)
            VALUES (?, ?, UTC_TIMESTAMP(), DATE_ADD(UTC_TIMESTAMP(), INTERVAL ? DAY))

        Args:
            db: Async database session
            title: Snippet title
            content: Snippet body
            expires_days: Days from now until the snippet expires

        Returns:
            The auto-increment id assigned by the database
        """
        snippet = Snippet(
            title=title,
            content=content,
            created=utc_now(),
            expires=utc_days_from_now(expires_days),
        )
        db.add(snippet)
        # flush (not commit): the id is assigned here, commit happens in get_db_session
        await db.flush()
        logger.info("Snippet %d created (expires in %d days)", snippet.id, expires_days)
        return snippet.id

    async def get(self, db: AsyncSession, snippet_id: int) -> Snippet:
        """
        Return an unexpired snippet by id.

        Equivalent SQL:
            SELECT id, title, content, created, expires FROM snippets
            WHERE expires > UTC_TIMESTAMP() AND id = ?

        Raises:
            NoRecordError: No snippet with this id, or it has expired
        """
        result = await db.execute(
            select(Snippet).where(Snippet.expires > utc_now(), Snippet.id == snippet_id)
        )
        snippet = result.scalar_one_or_none()
        if snippet is None:
            raise NoRecordError(resource="snippet", resource_id=snippet_id)
        return snippet

    async def latest(self, db: AsyncSession) -> List[Snippet]:
        """
        Return up to ten unexpired snippets, newest first.

        Equivalent SQL:
            SELECT id, title, content, created, expires FROM snippets
            WHERE expires > UTC_TIMESTAMP() ORDER BY created DESC LIMIT 10

        Rows created in the same second are ordered by id, newest first.
        """
        result = await db.execute(
            select(Snippet)
            .where(Snippet.expires > utc_now())
            .order_by(Snippet.created.desc(), Snippet.id.desc())
            .limit(LATEST_LIMIT)
        )
        return list(result.scalars().all())


snippet_service = SnippetService()
