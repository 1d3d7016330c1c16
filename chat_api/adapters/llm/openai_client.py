"""OpenAI LLM client adapter."""

from typing import Any, Sequence

from openai import AsyncOpenAI

from chat_api.adapters.llm.base import AbstractLLMClient, ChatPart, InlineDataPart, TextPart


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions with inline image support.

    Works with any OpenAI-compatible endpoint via ``base_url``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
        )
        self.model = model

    @staticmethod
    def _to_content(part: ChatPart) -> dict[str, Any]:
        if isinstance(part, TextPart):
            return {"type": "text", "text": part.text}
        if isinstance(part, InlineDataPart):
            return {
                "type": "image_url",
                "image_url": {"url": f"data:{part.mime_type};base64,{part.data}"},
            }
        raise TypeError(f"Unsupported part type: {type(part).__name__}")

    async def generate_reply(
        self,
        system_prompt: str,
        parts: Sequence[ChatPart],
        **kwargs: Any,
    ) -> str:
        """Generate a reply using OpenAI chat completions.

        Args:
            system_prompt: System message content.
            parts: User turn parts (text and/or image).
            **kwargs: Provider options (temperature, max_tokens, top_p, seed).

        Returns:
            str: Reply text.

        Raises:
            RuntimeError: If the API call fails or the response is empty.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": [self._to_content(p) for p in parts]},
            ],
        }

        for param in ("temperature", "max_tokens", "top_p", "seed"):
            if kwargs.get(param) is not None:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
            content = response.choices[0].message.content
        except Exception as exc:
            raise RuntimeError(f"OpenAI API error: {str(exc)}") from exc

        if not content:
            raise RuntimeError("LLM returned empty response")
        return content.strip()
