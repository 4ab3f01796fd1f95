"""Custom exception classes for structured error handling.

Every error the API can return is a LinguaError subclass. The single
exception handler in app/main.py renders them as ``{"message": ...}``.
"""

from typing import Any


class LinguaError(Exception):
    """Base exception for all Lingua Chat errors."""

    def __init__(self, code: str, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class UnauthorizedError(LinguaError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(code="UNAUTHORIZED", message=message, status_code=401)


class ConversationNotFoundError(LinguaError):
    def __init__(self, message: str = "Conversation not found") -> None:
        super().__init__(code="CONVERSATION_NOT_FOUND", message=message, status_code=404)


class RequestValidationFailedError(LinguaError):
    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(code="VALIDATION_ERROR", message=message, status_code=400)


class ModelInvocationError(LinguaError):
    def __init__(self, message: str = "Failed to process message") -> None:
        super().__init__(code="MODEL_INVOCATION_FAILED", message=message, status_code=500)


class MalformedModelReplyError(LinguaError):
    def __init__(self, message: str = "Failed to process message") -> None:
        super().__init__(code="MALFORMED_MODEL_REPLY", message=message, status_code=500)


class DatabaseConnectionError(LinguaError):
    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(code="DATABASE_ERROR", message=message, status_code=500)


class InternalServerError(LinguaError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(code="INTERNAL_ERROR", message=message, status_code=500)
