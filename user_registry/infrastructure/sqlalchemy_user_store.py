"""SQLAlchemy User Store — UserStore implementation over an AsyncSession.

Invariants:
    - create() commits before returning, so the id is durable when reloaded
    - A failed commit is rolled back and the original exception re-raised
    - lookup_by_id() re-reads the row instead of trusting the identity map
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from user_registry.core.domain_types import UserId
from user_registry.core.errors import ResourceNotFoundError
from user_registry.models.user import User as UserModel

logger = logging.getLogger(__name__)


class SQLAlchemyUserStore:
    """Persists users in the `users` table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lookup_by_name(self, name: str) -> UserModel | None:
        result = await self.db.execute(
            select(UserModel).where(UserModel.name == name),
        )
        return result.scalar_one_or_none()

    async def create(self, name: str) -> UserId:
        user = UserModel(name=name)
        self.db.add(user)
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        logger.debug("User row inserted", extra={"user_id": user.id})
        return UserId(user.id)

    async def lookup_by_id(self, user_id: UserId) -> UserModel:
        user = await self.db.get(UserModel, user_id, populate_existing=True)
        if user is None:
            raise ResourceNotFoundError("User", str(user_id))
        return user
