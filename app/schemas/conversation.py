"""Conversation and message request/response schemas.

Wire format is camelCase (``nativeLanguage``, ``targetContent`` …); the
alias generator maps it onto the snake_case ORM attribute names.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ConversationCreateRequest(_CamelModel):
    """POST /api/conversations request body."""

    title: str = Field(min_length=1)
    native_language: str = Field(min_length=1)
    target_language: str = Field(min_length=1)


class ConversationResponse(_CamelModel):
    """A single conversation as returned to its owner."""

    id: int
    user_id: str
    title: str
    native_language: str
    target_language: str
    created_at: datetime


class MessageResponse(_CamelModel):
    """A single persisted message."""

    id: int
    conversation_id: int
    role: Literal["user", "assistant"]
    native_content: str
    target_content: str
    created_at: datetime


class ConversationDetailResponse(_CamelModel):
    """GET /api/conversations/{id} response body."""

    conversation: ConversationResponse
    messages: list[MessageResponse]


class MessageCreateRequest(_CamelModel):
    """POST /api/conversations/{id}/messages request body."""

    content: str = Field(min_length=1)
