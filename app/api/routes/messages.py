"""Message exchange endpoint — the tutor turn."""

import structlog
from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user, get_exchange_service
from app.core.exceptions import InternalServerError, LinguaError
from app.core.security import AuthenticatedUser
from app.schemas.conversation import MessageCreateRequest, MessageResponse
from app.services.tutor.exchange import ExchangeService

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/conversations", tags=["messages"])


@router.post(
    "/{conversation_id}/messages",
    response_model=list[MessageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: int,
    body: MessageCreateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    exchange: ExchangeService = Depends(get_exchange_service),
) -> list[MessageResponse]:
    """Translate the user's message and generate the tutor's reply.

    Returns ``[userMessage, assistantMessage]``.
    """
    try:
        result = await exchange.handle_turn(
            conversation_id=conversation_id,
            user=user,
            content=body.content,
        )
    except LinguaError:
        raise
    except Exception as e:
        logger.exception("exchange_failed", conversation_id=conversation_id)
        raise InternalServerError("Failed to process message") from e

    return [MessageResponse.model_validate(m) for m in result.as_list()]
