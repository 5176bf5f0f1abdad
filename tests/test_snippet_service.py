"""
Snippetbox — Snippet Service Tests
====================================

What:  Tests for SnippetService insert / get / latest.
How:   Runs the real statements against SQLite (aiosqlite), where utc_now()
       compiles to CURRENT_TIMESTAMP; a mock session covers the pure
       not-found translation.

What we test:
    ✅ Insert then get returns the same snippet while unexpired
    ✅ Get after expiry raises NoRecordError
    ✅ Latest excludes expired rows, is newest first, and stops at ten
"""

from datetime import datetime, timedelta

import pytest
from unittest.mock import MagicMock

from snippetbox.exceptions import NoRecordError
from snippetbox.models.snippet import Snippet
from snippetbox.services.snippet_service import LATEST_LIMIT, SnippetService


async def _add_expired(db, title="Expired"):
    snippet = Snippet(
        title=title,
        content="gone",
        created=datetime(2020, 1, 1, 12, 0, 0),
        expires=datetime(2020, 1, 8, 12, 0, 0),
    )
    db.add(snippet)
    await db.commit()
    return snippet.id


class TestSnippetInsertAndGet:

    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_insert_returns_increasing_ids(self, db_session):
        first = await self.service.insert(db_session, "First", "one", 7)
        second = await self.service.insert(db_session, "Second", "two", 7)
        await db_session.commit()

        assert first >= 1
        assert second == first + 1

    @pytest.mark.asyncio
    async def test_insert_then_get_returns_same_snippet(self, db_session):
        snippet_id = await self.service.insert(
            db_session, "An old silent pond", "An old silent pond...\nA frog jumps in", 7
        )
        await db_session.commit()

        snippet = await self.service.get(db_session, snippet_id)

        assert snippet.id == snippet_id
        assert snippet.title == "An old silent pond"
        assert snippet.content == "An old silent pond...\nA frog jumps in"

    @pytest.mark.asyncio
    async def test_expires_is_days_after_created(self, db_session):
        snippet_id = await self.service.insert(db_session, "Week", "content", 7)
        await db_session.commit()

        snippet = await self.service.get(db_session, snippet_id)

        delta = snippet.expires - snippet.created
        assert timedelta(days=7) - timedelta(seconds=2) <= delta <= timedelta(days=7) + timedelta(seconds=2)

    @pytest.mark.asyncio
    async def test_get_missing_raises_no_record(self, db_session):
        with pytest.raises(NoRecordError):
            await self.service.get(db_session, 999)

    @pytest.mark.asyncio
    async def test_get_after_expiry_raises_no_record(self, db_session):
        snippet_id = await _add_expired(db_session)

        with pytest.raises(NoRecordError) as exc_info:
            await self.service.get(db_session, snippet_id)

        assert exc_info.value.context["resource_id"] == snippet_id

    @pytest.mark.asyncio
    async def test_get_translates_no_rows(self, mock_db_session):
        """No row from the driver becomes NoRecordError, nothing else."""
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        with pytest.raises(NoRecordError):
            await self.service.get(mock_db_session, 1)
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_driver_errors_pass_through(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError, match="connection lost"):
            await self.service.get(mock_db_session, 1)


class TestSnippetLatest:

    def setup_method(self):
        self.service = SnippetService()

    @pytest.mark.asyncio
    async def test_latest_empty(self, db_session):
        assert await self.service.latest(db_session) == []

    @pytest.mark.asyncio
    async def test_latest_excludes_expired(self, db_session):
        await _add_expired(db_session)
        live_id = await self.service.insert(db_session, "Live", "still here", 1)
        await db_session.commit()

        snippets = await self.service.latest(db_session)

        assert [s.id for s in snippets] == [live_id]

    @pytest.mark.asyncio
    async def test_latest_is_newest_first_and_limited(self, db_session):
        ids = []
        for i in range(LATEST_LIMIT + 2):
            ids.append(await self.service.insert(db_session, f"Snippet {i}", "body", 365))
        await db_session.commit()

        snippets = await self.service.latest(db_session)

        assert len(snippets) == LATEST_LIMIT
        assert [s.id for s in snippets] == list(reversed(ids))[:LATEST_LIMIT]

    @pytest.mark.asyncio
    async def test_latest_orders_by_created_before_id(self, db_session):
        newer = Snippet(
            title="Newer",
            content="x",
            created=datetime(2099, 1, 2),
            expires=datetime(2099, 2, 1),
        )
        older = Snippet(
            title="Older",
            content="x",
            created=datetime(2099, 1, 1),
            expires=datetime(2099, 2, 1),
        )
        # Newer gets the lower id
        db_session.add(newer)
        await db_session.flush()
        db_session.add(older)
        await db_session.commit()

        snippets = await self.service.latest(db_session)

        assert [s.title for s in snippets] == ["Newer", "Older"]
