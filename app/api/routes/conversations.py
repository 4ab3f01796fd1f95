"""Conversation CRUD endpoints."""

from fastapi import APIRouter, Depends, Response, status

from app.api.deps import get_conversation_store, get_current_user
from app.core.security import AuthenticatedUser
from app.schemas.conversation import (
    ConversationCreateRequest,
    ConversationDetailResponse,
    ConversationResponse,
    MessageResponse,
)
from app.services.storage import ConversationStore

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    user: AuthenticatedUser = Depends(get_current_user),
    store: ConversationStore = Depends(get_conversation_store),
) -> list[ConversationResponse]:
    """List the caller's conversations, newest first."""
    conversations = await store.list_conversations(user.user_id)
    return [ConversationResponse.model_validate(c) for c in conversations]


@router.post(
    "",
    response_model=ConversationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    body: ConversationCreateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ConversationStore = Depends(get_conversation_store),
) -> ConversationResponse:
    """Start a new conversation for a native/target language pair."""
    conversation = await store.create_conversation(
        user_id=user.user_id,
        title=body.title,
        native_language=body.native_language,
        target_language=body.target_language,
    )
    return ConversationResponse.model_validate(conversation)


@router.get("/{conversation_id}", response_model=ConversationDetailResponse)
async def get_conversation(
    conversation_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ConversationStore = Depends(get_conversation_store),
) -> ConversationDetailResponse:
    """Get a conversation with its messages in creation order."""
    conversation = await store.get_owned_conversation(conversation_id, user)
    messages = await store.list_messages(conversation_id)
    return ConversationDetailResponse(
        conversation=ConversationResponse.model_validate(conversation),
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    store: ConversationStore = Depends(get_conversation_store),
) -> Response:
    """Delete a conversation and all of its messages."""
    await store.get_owned_conversation(conversation_id, user)
    await store.delete_conversation(conversation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
