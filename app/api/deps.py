"""Shared FastAPI dependencies — auth, database sessions, service injection.

The LLM provider is created once during the FastAPI lifespan and stored on
app.state. All downstream code retrieves it via Depends() — never by
direct import — so tests can override it with a fake.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import AuthenticatedUser, authenticate_token
from app.db.postgres import get_async_session
from app.services.llm.base import LLMProvider
from app.services.storage import ConversationStore
from app.services.tutor.exchange import ExchangeService


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

async def get_db(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncSession:
    """Yield an async database session."""
    return session


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

async def get_current_user(request: Request) -> AuthenticatedUser:
    """Authenticate the caller from the session cookie."""
    return authenticate_token(request.cookies.get(settings.session_cookie_name))


# ---------------------------------------------------------------------------
# Service singleton — retrieved from app.state (set during lifespan)
# ---------------------------------------------------------------------------

def get_llm_provider(request: Request) -> LLMProvider:
    """Return the singleton LLM provider from app state."""
    return request.app.state.llm_provider


# ---------------------------------------------------------------------------
# Service constructors — wired via Depends()
# ---------------------------------------------------------------------------

async def get_conversation_store(
    db: AsyncSession = Depends(get_db),
) -> ConversationStore:
    """Return a ConversationStore bound to the request's session."""
    return ConversationStore(db)


async def get_exchange_service(
    llm: LLMProvider = Depends(get_llm_provider),
    store: ConversationStore = Depends(get_conversation_store),
) -> ExchangeService:
    """Return an ExchangeService using the configured persona."""
    return ExchangeService(llm=llm, store=store, persona=settings.tutor_persona)
