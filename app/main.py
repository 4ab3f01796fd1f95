"""FastAPI application entrypoint.

All routes prefixed /api. Auto-generated OpenAPI docs at /docs.

The LLM provider (OpenAI-compatible or Gemini, per LLM_PROVIDER) is created
once during the lifespan and stored on app.state for injection via Depends().
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes.conversations import router as conversations_router
from app.api.routes.health import router as health_router
from app.api.routes.messages import router as messages_router
from app.core.config import Settings, settings
from app.core.exceptions import LinguaError, RequestValidationFailedError
from app.db.postgres import close_postgres, create_tables
from app.services.llm.base import LLMProvider


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


_configure_logging()

logger = structlog.get_logger(__name__)


def build_llm_provider(config: Settings) -> LLMProvider:
    """Instantiate the configured provider. Imports stay lazy so only the
    selected SDK is loaded."""
    if config.llm_provider == "gemini":
        from app.services.llm.gemini import GeminiProvider

        return GeminiProvider(
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            timeout_seconds=config.llm_timeout_seconds,
        )

    from app.services.llm.openai_provider import OpenAIProvider

    return OpenAIProvider(
        api_key=config.openai_api_key,
        model=config.openai_model,
        base_url=config.openai_base_url,
        timeout_seconds=config.llm_timeout_seconds,
    )


def check_auth_settings(config: Settings) -> None:
    """Refuse to start without a session signing key."""
    if not config.jwt_secret_key:
        logger.error("jwt_secret_key_missing")
        raise RuntimeError("JWT_SECRET_KEY must be set to a non-empty value")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    # --- Startup ---
    logger.info(
        "app_startup",
        env=settings.app_env,
        llm_provider=settings.llm_provider,
        persona=settings.tutor_persona,
    )

    check_auth_settings(settings)

    if settings.auto_create_tables:
        await create_tables()

    app.state.llm_provider = build_llm_provider(settings)

    logger.info("app_providers_ready")
    yield

    # --- Shutdown ---
    logger.info("app_shutdown")
    await close_postgres()


app = FastAPI(
    title="Lingua Chat API",
    description="Language-learning chat: translations and in-character replies.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if not settings.is_production else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LinguaError)
async def lingua_error_handler(request: Request, exc: LinguaError) -> JSONResponse:
    """Structured error response for all Lingua Chat exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed path or body → 400 with the first validation message."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.info("request_validation_failed", path=request.url.path, error=message)
    error = RequestValidationFailedError(message)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Mount all routers
app.include_router(health_router, prefix="/api")
app.include_router(conversations_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
