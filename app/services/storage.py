"""Persistence gateway for conversations and messages.

Thin async wrapper over the SQLAlchemy session. Never commits: the request
scoped session from get_async_session() owns the transaction boundary.
"""

from collections.abc import Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConversationNotFoundError, UnauthorizedError
from app.core.security import AuthenticatedUser
from app.models.conversation import Conversation
from app.models.message import Message

logger = structlog.get_logger(__name__)


class ConversationStore:
    """CRUD operations over the conversations and messages tables."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_conversations(self, user_id: str) -> Sequence[Conversation]:
        """All conversations owned by *user_id*, newest first."""
        result = await self._db.execute(
            select(Conversation)
            .where(Conversation.user_id == user_id)
            .order_by(Conversation.created_at.desc(), Conversation.id.desc())
        )
        return result.scalars().all()

    async def create_conversation(
        self,
        user_id: str,
        title: str,
        native_language: str,
        target_language: str,
    ) -> Conversation:
        conversation = Conversation(
            user_id=user_id,
            title=title,
            native_language=native_language,
            target_language=target_language,
        )
        self._db.add(conversation)
        await self._db.flush()
        logger.info(
            "conversation_created",
            conversation_id=conversation.id,
            native_language=native_language,
            target_language=target_language,
        )
        return conversation

    async def get_conversation(self, conversation_id: int) -> Conversation | None:
        result = await self._db.execute(
            select(Conversation).where(Conversation.id == conversation_id)
        )
        return result.scalar_one_or_none()

    async def get_owned_conversation(
        self, conversation_id: int, user: AuthenticatedUser
    ) -> Conversation:
        """Fetch a conversation the caller owns.

        Raises ConversationNotFoundError if absent and UnauthorizedError if
        it belongs to someone else (checked in that order).
        """
        conversation = await self.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError()
        if conversation.user_id != user.user_id:
            logger.warning(
                "conversation_access_denied",
                conversation_id=conversation_id,
                user_id=user.user_id,
            )
            raise UnauthorizedError()
        return conversation

    async def delete_conversation(self, conversation_id: int) -> None:
        """Delete a conversation and, first, every message that belongs to it."""
        await self._db.execute(
            delete(Message).where(Message.conversation_id == conversation_id)
        )
        await self._db.execute(
            delete(Conversation).where(Conversation.id == conversation_id)
        )
        logger.info("conversation_deleted", conversation_id=conversation_id)

    async def create_message(
        self,
        conversation_id: int,
        role: str,
        native_content: str,
        target_content: str,
    ) -> Message:
        message = Message(
            conversation_id=conversation_id,
            role=role,
            native_content=native_content,
            target_content=target_content,
        )
        self._db.add(message)
        await self._db.flush()
        return message

    async def list_messages(self, conversation_id: int) -> Sequence[Message]:
        """Messages of a conversation in creation order."""
        result = await self._db.execute(
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return result.scalars().all()
