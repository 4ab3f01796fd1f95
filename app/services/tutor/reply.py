"""Parsing and presence-checking of the model's structured reply."""

import json
from dataclasses import dataclass
from typing import Any

import structlog

from app.core.exceptions import MalformedModelReplyError

logger = structlog.get_logger(__name__)

_REQUIRED_FIELDS = ("userTarget", "aiTarget", "aiNative")


@dataclass(frozen=True)
class TutorReply:
    """Validated model output for one turn."""

    user_target: str
    ai_target: str
    ai_native: str
    ai_transliteration: str | None = None

    @property
    def assistant_target_text(self) -> str:
        """Target-language reply, with the transliteration appended when present."""
        if self.ai_transliteration:
            return f"{self.ai_target}\n({self.ai_transliteration})"
        return self.ai_target


def _present(value: Any) -> bool:
    return value is not None and value != ""


def parse_tutor_reply(raw: str) -> TutorReply:
    """Parse raw model text into a TutorReply.

    Only presence is checked: the three mandatory fields must be neither
    null nor "". Types and content are trusted; non-string values are
    converted with str() since they are stored as text.

    Raises:
        MalformedModelReplyError: If the text is not a JSON object or a
            mandatory field is missing or empty.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error("model_reply_not_json", raw_len=len(raw or ""))
        raise MalformedModelReplyError() from e

    if not isinstance(payload, dict):
        logger.error("model_reply_not_object", kind=type(payload).__name__)
        raise MalformedModelReplyError()

    missing = [name for name in _REQUIRED_FIELDS if not _present(payload.get(name))]
    if missing:
        logger.error("model_reply_invalid", missing_fields=missing)
        raise MalformedModelReplyError()

    transliteration = payload.get("aiTransliteration")
    return TutorReply(
        user_target=str(payload["userTarget"]),
        ai_target=str(payload["aiTarget"]),
        ai_native=str(payload["aiNative"]),
        ai_transliteration=str(transliteration) if _present(transliteration) else None,
    )
