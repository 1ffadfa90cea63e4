"""
Kindred — Chat channel provisioning

A chat between two users lives under the canonical pair key (both ids sorted
and joined), so either participant can compute it without a lookup and
``create_or_get`` is idempotent regardless of argument order.

Message delivery itself belongs to the chat transport; this service only
owns the chat's metadata record and its last-message preview.
"""

from __future__ import annotations

import structlog

from app.database import utcnow
from app.exceptions import NotFound, SelfConnection
from app.models.chat import Chat
from app.store.chats import ChatStore
from app.utils.identity import directional_keys, first_name_only, pair_key

logger = structlog.get_logger("kindred.chat_provisioner")


class ChatProvisioner:
    """Create, look up and annotate chat channels between connected users."""

    def __init__(self, chat_store: ChatStore) -> None:
        self.chats = chat_store

    async def create_or_get(
        self,
        user_a: str,
        user_b: str,
        name_a: str,
        name_b: str,
    ) -> str:
        """Return the pair's chat id, creating the chat record on first use.

        Parameters
        ----------
        user_a, user_b:
            Participant ids, in any order.
        name_a, name_b:
            Display names for ``user_a`` and ``user_b``; only the first name
            is stored.

        Returns
        -------
        str
            The canonical chat id.
        """
        if user_a == user_b:
            raise SelfConnection("A chat needs two different participants.")

        chat_id = pair_key(user_a, user_b)
        log = logger.bind(chat_id=chat_id)

        existing = await self.chats.get(chat_id)
        if existing is not None:
            log.info("chat_already_exists")
            return chat_id

        first, second = sorted((user_a, user_b))
        chat = Chat(
            id=chat_id,
            participants=[user_a, user_b],
            participant_a=first,
            participant_b=second,
            participant_names={
                user_a: first_name_only(name_a),
                user_b: first_name_only(name_b),
            },
            last_message=None,
            last_message_at=None,
            created_at=utcnow(),
        )

        created = await self.chats.create(chat)
        if created:
            log.info("chat_created")
        else:
            log.info("chat_created_concurrently")
        return chat_id

    async def find_existing(self, user_a: str, user_b: str) -> str | None:
        """Return the pair's chat id if a chat exists, else None.

        Checks the canonical id and, for chats created before ids were
        canonicalised, the reverse concatenation.
        """
        candidates = directional_keys(user_a, user_b)
        found = await self.chats.existing_ids(candidates)
        for chat_id in candidates:
            if chat_id in found:
                return chat_id
        return None

    async def update_last_message(
        self,
        chat_id: str,
        text: str,
        sender_id: str,
        sender_name: str,
    ) -> bool:
        """Best-effort update of the chat's last-message preview.

        Never raises: a failed preview update must not fail the send that
        triggered it.  Returns whether the preview was written.
        """
        log = logger.bind(chat_id=chat_id, sender_id=sender_id)
        sent_at = utcnow()
        summary = {
            "text": text,
            "sender_id": sender_id,
            "sender_name": first_name_only(sender_name),
            "created_at": sent_at.isoformat(),
        }

        try:
            updated = await self.chats.update_last_message(chat_id, summary, sent_at)
        except Exception:
            log.exception("last_message_update_failed")
            return False

        if not updated:
            log.warning("last_message_update_skipped", reason="chat_not_found")
            return False

        log.debug("last_message_updated")
        return True

    async def list_chats(self, user_id: str) -> list[Chat]:
        """All chats the user participates in, most recent activity first."""
        chats = await self.chats.for_participant(user_id)
        logger.info("user_chats_listed", user_id=user_id, count=len(chats))
        return chats

    async def other_participant(self, chat_id: str, user_id: str) -> dict:
        """Return the id and first name of the chat member who is not ``user_id``."""
        chat = await self.chats.get(chat_id)
        if chat is None or user_id not in (chat.participants or []):
            raise NotFound(f"Chat {chat_id} not found for user {user_id}.")

        other_id = next((uid for uid in chat.participants if uid != user_id), None)
        if other_id is None:
            raise NotFound(f"Chat {chat_id} has no other participant.")

        return {
            "user_id": other_id,
            "first_name": (chat.participant_names or {}).get(other_id, ""),
        }
