"""
NoteKeeper Backend: User Service Tests
======================================

What:  Registration: hashing, uniqueness and the boolean contract.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from unittest.mock import AsyncMock, MagicMock

from notekeeper.models import User
from notekeeper.schemas.user import UserRegister
from notekeeper.services.token_service import token_service
from notekeeper.services.user_service import UserService


def _register_model(**overrides) -> UserRegister:
    data = {
        "email": "erin@example.com",
        "username": "erin",
        "password": "long-enough-pw",
        "confirm_password": "long-enough-pw",
    }
    data.update(overrides)
    return UserRegister(**data)


class TestRegisterUser:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_register_stores_hashed_password(self, db_session):
        assert await self.service.register_user(db_session, _register_model()) is True

        user = (await db_session.execute(select(User))).scalar_one()
        assert user.username == "erin"
        assert user.password_hash != "long-enough-pw"
        assert token_service.verify_password("long-enough-pw", user.password_hash)
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, db_session):
        await self.service.register_user(db_session, _register_model())

        again = _register_model(email="other@example.com")
        assert await self.service.register_user(db_session, again) is False

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_case_insensitively(self, db_session):
        await self.service.register_user(db_session, _register_model())

        again = _register_model(email="ERIN@Example.com", username="erin2")
        assert await self.service.register_user(db_session, again) is False

    @pytest.mark.asyncio
    async def test_storage_error_returns_false(self, mock_db_session):
        mock_db_session.execute = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("db down"))
        )

        assert await self.service.register_user(mock_db_session, _register_model()) is False
        mock_db_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_returns_false(self, mock_db_session):
        count_result = MagicMock()
        count_result.scalar.return_value = 0
        insert_result = MagicMock()
        insert_result.scalars.return_value.all.return_value = [1]
        mock_db_session.execute = AsyncMock(side_effect=[count_result, insert_result])
        mock_db_session.commit = AsyncMock(
            side_effect=OperationalError("COMMIT", {}, Exception("db down"))
        )

        assert await self.service.register_user(mock_db_session, _register_model()) is False
        mock_db_session.rollback.assert_awaited_once()


class TestUserRegisterSchema:

    def test_password_confirmation_must_match(self):
        with pytest.raises(PydanticValidationError):
            _register_model(confirm_password="something-else")

    def test_invalid_email_rejected(self):
        with pytest.raises(PydanticValidationError):
            _register_model(email="not-an-email")
