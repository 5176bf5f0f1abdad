"""
Snippetbox — User Service Tests
=================================

What:  Tests for account creation, authentication and existence checks.
How:   Real SQLite database through the db_session fixture; bcrypt at its
       minimum cost so hashing stays fast.
"""

import pytest
from sqlalchemy import select

from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError
from snippetbox.models.user import User
from snippetbox.services.user_service import UserService, check_password, hash_password


class TestPasswordHashing:

    def test_hash_is_bcrypt_length(self):
        hashed = hash_password("pa$$word123", rounds=4)
        assert len(hashed) == 60
        assert hashed.startswith("$2")

    def test_check_password(self):
        hashed = hash_password("pa$$word123", rounds=4)
        assert check_password("pa$$word123", hashed) is True
        assert check_password("wrong-password", hashed) is False


class TestUserService:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_insert_stores_hash_not_password(self, db_session):
        user_id = await self.service.insert(
            db_session, "Alice", "alice@example.com", "pa$$word123", rounds=4
        )
        await db_session.commit()

        result = await db_session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one()
        assert user.email == "alice@example.com"
        assert user.hashed_password != "pa$$word123"
        assert check_password("pa$$word123", user.hashed_password)

    @pytest.mark.asyncio
    async def test_insert_duplicate_email(self, db_session):
        await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123", rounds=4)
        await db_session.commit()

        with pytest.raises(DuplicateEmailError) as exc_info:
            await self.service.insert(
                db_session, "Other Alice", "alice@example.com", "different123", rounds=4
            )

        assert exc_info.value.message == "Email address is already in use"

    @pytest.mark.asyncio
    async def test_authenticate_returns_user_id(self, db_session):
        user_id = await self.service.insert(
            db_session, "Alice", "alice@example.com", "pa$$word123", rounds=4
        )
        await db_session.commit()

        assert await self.service.authenticate(db_session, "alice@example.com", "pa$$word123") == user_id

    @pytest.mark.asyncio
    async def test_authenticate_wrong_password(self, db_session):
        await self.service.insert(db_session, "Alice", "alice@example.com", "pa$$word123", rounds=4)
        await db_session.commit()

        with pytest.raises(InvalidCredentialsError):
            await self.service.authenticate(db_session, "alice@example.com", "not-the-password")

    @pytest.mark.asyncio
    async def test_authenticate_unknown_email(self, db_session):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await self.service.authenticate(db_session, "nobody@example.com", "pa$$word123")

        assert exc_info.value.message == "Email or password is incorrect"

    @pytest.mark.asyncio
    async def test_exists(self, db_session):
        user_id = await self.service.insert(
            db_session, "Alice", "alice@example.com", "pa$$word123", rounds=4
        )
        await db_session.commit()

        assert await self.service.exists(db_session, user_id) is True
        assert await self.service.exists(db_session, user_id + 1) is False
