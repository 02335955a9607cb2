"""LLM adapter layer - abstracts over OpenAI-compatible providers."""

from adgen.adapters.llm.base import AbstractLLMClient
from adgen.adapters.llm.factory import create_llm_client
from adgen.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
