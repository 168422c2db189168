"""Relational persistence for users and chats."""

import logging
from collections.abc import Sequence

from sqlalchemy import Row, desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.chat import Chat
from app.models.user import User

logger = logging.getLogger(__name__)


class ChatStore:
    """Queries and writes against the users and chats tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user(self, user_id: str) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create_user(
        self,
        user_id: str,
        email: str,
        name: str | None,
        role: str,
    ) -> User:
        """
        Insert a user and commit.

        Two registrations for the same email can race past the existence
        check. The loser of the primary key / unique email race rolls back
        and returns the row the winner committed.
        """
        user = User(id=user_id, email=email, name=name, role=role)
        self.session.add(user)

        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            existing = await self.get_user(user_id)
            if existing is None:
                raise
            logger.info(f"User {user_id} was created concurrently, reusing it")
            return existing

        return user

    async def recent_chats(self, user_id: str, limit: int) -> Sequence[Row]:
        """
        Latest exchanges for a user, newest first.

        Returns:
            Rows with ``message`` and ``reply`` attributes, at most ``limit``.
        """
        result = await self.session.execute(
            select(Chat.message, Chat.reply)
            .where(Chat.user_id == user_id)
            .order_by(desc(Chat.created_at))
            .limit(limit)
        )
        return result.all()

    async def create_chat(self, user_id: str, message: str, reply: str) -> Chat:
        """Insert a chat exchange and commit."""
        chat = Chat(user_id=user_id, message=message, reply=reply)
        self.session.add(chat)
        await self.session.commit()
        return chat

    async def list_chats(self, user_id: str) -> Sequence[Row]:
        """Every exchange for a user, in the database's natural order."""
        result = await self.session.execute(
            select(Chat.message, Chat.reply).where(Chat.user_id == user_id)
        )
        return result.all()
