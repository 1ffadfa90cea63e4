"""
Kindred — Chat metadata store
"""

from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError

from app.models.chat import Chat
from app.store.base import SessionStore, store_operation

logger = structlog.get_logger("kindred.store.chats")


class ChatStore(SessionStore):

    @store_operation("chats.get")
    async def get(self, chat_id: str) -> Chat | None:
        return await self.db.get(Chat, chat_id)

    @store_operation("chats.existing_ids")
    async def existing_ids(self, chat_ids: list[str]) -> set[str]:
        """Return the subset of ``chat_ids`` that have a chat record."""
        if not chat_ids:
            return set()
        stmt = select(Chat.id).where(Chat.id.in_(chat_ids))
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    @store_operation("chats.create")
    async def create(self, chat: Chat) -> bool:
        """Insert ``chat``.

        Returns False when a chat with the same id was inserted concurrently;
        the existing row is left untouched.
        """
        try:
            async with self.db.begin_nested():
                self.db.add(chat)
        except IntegrityError:
            logger.info("chat_insert_conflict", chat_id=chat.id)
            return False
        return True

    @store_operation("chats.for_participant")
    async def for_participant(self, user_id: str) -> list[Chat]:
        """Chats containing ``user_id``, most recent activity first."""
        stmt = (
            select(Chat)
            .where(or_(Chat.participant_a == user_id, Chat.participant_b == user_id))
            .order_by(
                Chat.last_message_at.desc().nulls_last(),
                Chat.created_at.desc(),
            )
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    @store_operation("chats.update_last_message")
    async def update_last_message(
        self,
        chat_id: str,
        summary: dict,
        sent_at: datetime,
    ) -> bool:
        """Write the last-message summary and commit; False if the chat is missing.

        Commits the session itself, so the store must be bound to a session
        from ``get_isolated_db`` rather than the request unit of work.
        """
        result = await self.db.execute(
            update(Chat)
            .where(Chat.id == chat_id)
            .values(last_message=summary, last_message_at=sent_at)
        )
        await self.db.commit()
        return result.rowcount > 0
