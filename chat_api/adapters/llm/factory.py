"""Factory pattern for creating LLM client instances."""

from chat_api.adapters.llm.base import AbstractLLMClient
from chat_api.adapters.llm.gemini_client import GeminiClient
from chat_api.adapters.llm.openai_client import OpenAIClient
from chat_api.core.config import LLMSettings, settings
from chat_api.core.errors import ValidationAppError

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Instantiate the LLM client for the configured provider.

    Args:
        llm_settings: Optional settings; defaults to global LLM settings.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ValidationAppError: If the provider is unknown or its API key is missing.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ValidationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not cfg.api_key:
        raise ValidationAppError(
            code="llm_missing_api_key",
            message=f"{provider} provider requires LLM_API_KEY environment variable",
            details={"provider": provider},
        )

    if provider == "gemini":
        return GeminiClient(
            api_key=cfg.api_key,
            model=cfg.model,
            timeout_seconds=cfg.timeout_seconds,
        )

    return OpenAIClient(
        api_key=cfg.api_key,
        model=cfg.model,
        base_url=cfg.base_url,
        timeout_seconds=cfg.timeout_seconds,
    )
