"""Central LLM client for all OpenAI API requests."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, AsyncOpenAI
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from wortschatz.config import settings
from wortschatz.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Global client instance
_client: AsyncOpenAI | None = None


@dataclass
class OracleReply(Generic[T]):
    """Validated oracle output plus the model that produced it."""

    data: T
    model: str


def is_configured() -> bool:
    """Check whether an OpenAI credential is available."""
    return settings.oracle_configured


def get_client() -> AsyncOpenAI:
    """Get or create the global OpenAI client."""
    global _client
    if _client is None:
        _client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.oracle_timeout)
    return _client


def _describe_failure(error: Exception) -> str:
    """Turn an OpenAI SDK exception into a short, user-facing message."""
    if isinstance(error, APITimeoutError):
        return f"OpenAI request timed out after {settings.oracle_timeout:.0f}s"
    if isinstance(error, APIConnectionError):
        return "Cannot connect to OpenAI"
    if isinstance(error, APIStatusError):
        return f"OpenAI returned HTTP {error.status_code}"
    return f"OpenAI request failed: {error}"


async def structured_completion(
    system_prompt: str,
    payload: dict[str, Any] | str,
    response_model: type[T],
    temperature: float,
    model: str | None = None,
    schema_hint: str | None = None,
    feature: str = "AI completion",
) -> OracleReply[T]:
    """
    Make a chat completion request and validate the JSON reply.

    Args:
        system_prompt: Instructions for the model
        payload: User message; dicts are sent as JSON
        response_model: Pydantic model the reply must satisfy
        temperature: Sampling temperature
        model: Optional model override (defaults to settings.completion_model)
        schema_hint: Optional description of the reply shape, appended to the prompt
        feature: Name used in the not-configured message

    Returns:
        OracleReply with the validated reply and the reported model id

    Raises:
        ConfigurationError: No OpenAI credential configured
        UpstreamError: Transport failure, empty reply, invalid JSON or schema mismatch
    """
    if not is_configured():
        raise ConfigurationError(f"{feature} is not configured")

    client = get_client()
    model = model or settings.completion_model
    if schema_hint:
        system_prompt = f"{system_prompt}\n\n{schema_hint}"
    user_content = (
        payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
    )

    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            response_format={"type": "json_object"},
            temperature=temperature,
        )
    except APIError as e:
        message = _describe_failure(e)
        logger.error(f"{response_model.__name__} request failed: {e}")
        raise UpstreamError(message) from e

    content = response.choices[0].message.content if response.choices else None
    if not content:
        raise UpstreamError("Empty response from OpenAI")

    try:
        raw: Any = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parse error: {e}, text: {content[:150]}")
        raise UpstreamError("OpenAI returned invalid JSON") from e

    if not isinstance(raw, dict):
        raise UpstreamError("OpenAI returned JSON that is not an object")

    try:
        data = response_model.model_validate(raw)
    except SchemaValidationError as e:
        logger.warning(f"{response_model.__name__} schema mismatch: {e}")
        raise UpstreamError("OpenAI response does not match the expected schema") from e

    return OracleReply(data=data, model=response.model or model)
