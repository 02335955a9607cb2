"""OpenAI-compatible chat completions client adapter.

Sarvam exposes an OpenAI-compatible ``/v1/chat/completions`` endpoint but
authenticates with an ``api-subscription-key`` header, so the key is sent
both as that header and as the SDK's bearer token.
"""

import json
import logging
import re
from typing import Any

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from adgen.adapters.llm.base import AbstractLLMClient
from adgen.core.errors import LLMAppError

logger = logging.getLogger(__name__)

SARVAM_BASE_URL = "https://api.sarvam.ai/v1"

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def _strip_code_fence(content: str) -> str:
    match = _FENCE_RE.match(content)
    return match.group(1) if match else content


class OpenAIClient(AbstractLLMClient):
    """Client for calling chat completions and returning JSON.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
        extra_headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize the async client.

        Args:
            api_key: Provider API key for authentication.
            model: Model name (e.g., "sarvam-m", "gpt-4o-mini").
            base_url: Optional custom base URL for the API.
            timeout_seconds: Timeout for requests in seconds.
            extra_headers: Headers added to every request.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
            default_headers=extra_headers,
        )
        self.model = model

    async def generate_json(
        self,
        prompt: str,
        *,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Generate structured JSON using chat completions.

        Args:
            prompt: User message to send to the model.
            system_prompt: Optional system message.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            dict[str, Any]: Parsed JSON object from the model response.

        Raises:
            LLMAppError: upstream_error (upstream non-2xx, carries its status),
                upstream_unreachable (transport failure or timeout), or
                upstream_parse_error (content is not a JSON object).
        """
        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": kwargs.pop("temperature", 0.4),
        }

        allowed_params = {
            "max_tokens",
            "top_p",
            "frequency_penalty",
            "presence_penalty",
            "seed",
        }
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except APIStatusError as exc:
            logger.warning(
                "llm.upstream_error",
                extra={"upstream_status": exc.status_code, "model": self.model},
            )
            raise LLMAppError(
                code="upstream_error",
                message="Upstream API returned an error",
                details={"upstream_status": exc.status_code},
                status_code=exc.status_code,
            ) from exc
        except (APITimeoutError, APIConnectionError) as exc:
            logger.warning(
                "llm.upstream_unreachable",
                extra={"error_type": type(exc).__name__, "model": self.model},
            )
            raise LLMAppError(
                code="upstream_unreachable",
                message="Failed to contact upstream API",
            ) from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise LLMAppError(
                code="upstream_parse_error",
                message="Failed to parse upstream response",
            ) from exc

        if not content:
            raise LLMAppError(
                code="upstream_parse_error",
                message="Failed to parse upstream response",
                details={"hint": "empty completion"},
            )

        try:
            parsed = json.loads(_strip_code_fence(content.strip()))
        except json.JSONDecodeError as exc:
            logger.warning(
                "llm.invalid_json",
                extra={"model": self.model, "content_length": len(content)},
            )
            raise LLMAppError(
                code="upstream_parse_error",
                message="Failed to parse upstream response",
            ) from exc

        if not isinstance(parsed, dict):
            raise LLMAppError(
                code="upstream_parse_error",
                message="Failed to parse upstream response",
                details={"hint": "expected a JSON object"},
            )
        return parsed
