"""Message exchange orchestrator: one user turn in, two messages out.

Turn flow:
  1. Load the conversation (404 if missing)
  2. Check ownership (401) before any model call
  3. Compose the system prompt from the stored language pair
  4. Single JSON-mode LLM call, no retry
  5. Validate the reply (500 if malformed)
  6. Persist user message, then assistant message
  7. Return (user_message, assistant_message)

Nothing is written until step 5 succeeds, so a failed turn leaves no rows.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog

from app.core.security import AuthenticatedUser
from app.models.message import Message
from app.services.llm.base import LLMProvider
from app.services.storage import ConversationStore
from app.services.tutor.prompts import Persona, build_system_prompt
from app.services.tutor.reply import parse_tutor_reply

logger = structlog.get_logger(__name__)

_MAX_REPLY_TOKENS = 500
_TEMPERATURE = 0.7


@dataclass(frozen=True)
class ExchangeResult:
    """The persisted pair for one turn, user message first."""

    user_message: Message
    assistant_message: Message

    def as_list(self) -> list[Message]:
        return [self.user_message, self.assistant_message]


class ExchangeService:
    """Runs a single tutor turn against one conversation."""

    def __init__(
        self,
        llm: LLMProvider,
        store: ConversationStore,
        persona: Persona | str = Persona.TUTOR,
    ) -> None:
        self._llm = llm
        self._store = store
        self._persona = Persona(persona)

    async def handle_turn(
        self,
        conversation_id: int,
        user: AuthenticatedUser,
        content: str,
    ) -> ExchangeResult:
        start = time.monotonic()

        conversation = await self._store.get_owned_conversation(conversation_id, user)

        system_prompt = build_system_prompt(
            native_language=conversation.native_language,
            target_language=conversation.target_language,
            persona=self._persona,
        )

        response = await self._llm.generate(
            prompt=content,
            system_prompt=system_prompt,
            max_tokens=_MAX_REPLY_TOKENS,
            temperature=_TEMPERATURE,
            json_mode=True,
        )
        reply = parse_tutor_reply(response.text)

        user_message = await self._store.create_message(
            conversation_id=conversation.id,
            role="user",
            native_content=content,
            target_content=reply.user_target,
        )
        assistant_message = await self._store.create_message(
            conversation_id=conversation.id,
            role="assistant",
            native_content=reply.ai_native,
            target_content=reply.assistant_target_text,
        )

        logger.info(
            "exchange_completed",
            conversation_id=conversation.id,
            persona=self._persona.value,
            transliterated=reply.ai_transliteration is not None,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            latency_ms=int((time.monotonic() - start) * 1000),
        )
        return ExchangeResult(user_message=user_message, assistant_message=assistant_message)
