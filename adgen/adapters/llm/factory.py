"""Factory pattern for creating LLM client instances."""

from adgen.adapters.llm.base import AbstractLLMClient
from adgen.adapters.llm.openai_client import SARVAM_BASE_URL, OpenAIClient
from adgen.core.config import settings
from adgen.core.errors import ConfigurationAppError


def create_llm_client() -> AbstractLLMClient:
    """Factory function to instantiate LLM clients based on provider.

    Reads configuration from adgen.core.config.settings (Pydantic Settings).

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ConfigurationAppError: If the provider is unknown or has no API key.
    """
    provider = settings.llm.provider.lower()

    if provider not in ("sarvam", "openai"):
        raise ConfigurationAppError(
            code="server_misconfigured",
            message="Server misconfigured",
            details={"hint": f"Unknown LLM provider '{provider}'. Supported: sarvam, openai"},
        )

    if not settings.llm.api_key:
        raise ConfigurationAppError(
            code="server_misconfigured",
            message="Server misconfigured",
            details={"hint": "Set the LLM_API_KEY environment variable"},
        )

    if provider == "sarvam":
        return OpenAIClient(
            api_key=settings.llm.api_key,
            model=settings.llm.model,
            base_url=settings.llm.base_url or SARVAM_BASE_URL,
            timeout_seconds=settings.llm.timeout_seconds,
            extra_headers={"api-subscription-key": settings.llm.api_key},
        )

    return OpenAIClient(
        api_key=settings.llm.api_key,
        model=settings.llm.model,
        base_url=settings.llm.base_url,
        timeout_seconds=settings.llm.timeout_seconds,
    )
