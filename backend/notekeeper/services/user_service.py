"""
NoteKeeper Backend: User Service (Registration)
===============================================

What:  Inserts new user records.
How:   Checks email/username uniqueness, hashes the password with bcrypt,
       inserts one row and reports success as a boolean.

Contract:
    One call, one boolean. A duplicate email or username, a constraint
    violation from a concurrent registration, or any storage error all
    return False; the router turns that into 400.
    A True result has already been committed.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, insert, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.models.user import User
from notekeeper.schemas.user import UserRegister
from notekeeper.services.token_service import token_service

logger = logging.getLogger(__name__)


class UserService:

    async def register_user(self, db: AsyncSession, model: UserRegister) -> bool:
        """
        Register a new account.

        Returns:
            True iff exactly one user row was inserted.
        """
        email = str(model.email).lower()
        stmt = (
            insert(User)
            .values(
                email=email,
                username=model.username,
                password_hash=token_service.hash_password(model.password),
                first_name=model.first_name,
                last_name=model.last_name,
                created_at=datetime.now(timezone.utc),
            )
            .returning(User.id)
        )
        try:
            if await self._is_taken(db, email, model.username):
                logger.info("Registration rejected: email or username already in use")
                return False

            result = await db.execute(stmt)
            inserted_ids = list(result.scalars().all())
            if len(inserted_ids) != 1:
                logger.warning("Registration inserted %d rows", len(inserted_ids))
                await db.rollback()
                return False

            # True must mean committed
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same name
            logger.info("Registration rejected by unique constraint")
            await db.rollback()
            return False
        except SQLAlchemyError as e:
            logger.error("Database error during registration: %s", str(e))
            await db.rollback()
            return False

        logger.info("User %s registered", inserted_ids[0])
        return True

    async def _is_taken(self, db: AsyncSession, email: str, username: str) -> bool:
        stmt = (
            select(func.count(User.id))
            .where(or_(func.lower(User.email) == email, User.username == username))
        )
        result = await db.execute(stmt)
        return (result.scalar() or 0) > 0


user_service = UserService()
