"""LLM adapter layer - abstracts over multiple LLM providers."""

from chat_api.adapters.llm.base import AbstractLLMClient, ChatPart, InlineDataPart, TextPart
from chat_api.adapters.llm.factory import create_llm_client
from chat_api.adapters.llm.gemini_client import GeminiClient
from chat_api.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "ChatPart",
    "GeminiClient",
    "InlineDataPart",
    "OpenAIClient",
    "TextPart",
    "create_llm_client",
]
