"""OpenAI-compatible LLM provider implementation.

Uses the openai SDK's AsyncOpenAI client. ``base_url`` lets the same
provider target any OpenAI-compatible gateway.
Every call has a timeout and structured error logging; failures surface
as ModelInvocationError.
"""

import asyncio

import structlog
from openai import AsyncOpenAI

from app.core.exceptions import ModelInvocationError
from app.services.llm.base import LLMProvider, LLMResponse

logger = structlog.get_logger(__name__)


class OpenAIProvider(LLMProvider):
    """Chat completions via the OpenAI API (or a compatible endpoint)."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url or None)
        self._model = model
        self._timeout_seconds = timeout_seconds
        logger.info("openai_provider_initialized", model=model, base_url=base_url)

    async def generate(
        self,
        prompt: str,
        system_prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate a complete response using chat completions."""
        extra: dict = {}
        if json_mode:
            extra["response_format"] = {"type": "json_object"}
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    max_tokens=max_tokens,
                    temperature=temperature,
                    **extra,
                ),
                timeout=self._timeout_seconds,
            )
            text = response.choices[0].message.content or ""
            usage = response.usage
            result = LLMResponse(
                text=text,
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
            )
            logger.debug(
                "openai_generate_ok",
                input_tokens=result.input_tokens,
                output_tokens=result.output_tokens,
                prompt_len=len(prompt),
            )
            return result
        except asyncio.TimeoutError as e:
            logger.error(
                "openai_generate_timeout",
                prompt_len=len(prompt),
                timeout_seconds=self._timeout_seconds,
            )
            raise ModelInvocationError() from e
        except Exception as e:
            logger.error(
                "openai_generate_failed",
                error=str(e),
                model=self._model,
                prompt_len=len(prompt),
            )
            raise ModelInvocationError() from e
