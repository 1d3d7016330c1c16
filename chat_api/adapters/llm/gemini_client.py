"""Gemini client adapter (google-genai SDK)."""

from __future__ import annotations

import base64
import binascii
from typing import Any, Sequence

from google import genai
from google.genai import types

from chat_api.adapters.llm.base import AbstractLLMClient, ChatPart, InlineDataPart, TextPart


class GeminiClient(AbstractLLMClient):
    """Client for Gemini ``generate_content`` using the async surface of the SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini Developer API key.
            model: Model name (e.g., "gemini-1.5-flash").
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )
        self.model = model

    @staticmethod
    def _to_part(part: ChatPart) -> types.Part:
        if isinstance(part, TextPart):
            return types.Part.from_text(text=part.text)
        if isinstance(part, InlineDataPart):
            try:
                data = base64.b64decode(part.data, validate=True)
            except binascii.Error as exc:
                raise RuntimeError("Inline image is not valid base64") from exc
            return types.Part.from_bytes(data=data, mime_type=part.mime_type)
        raise TypeError(f"Unsupported part type: {type(part).__name__}")

    async def generate_reply(
        self,
        system_prompt: str,
        parts: Sequence[ChatPart],
        **kwargs: Any,
    ) -> str:
        """Send the system instruction plus one user turn and return the reply text.

        Raises:
            RuntimeError: If the API call fails or the response carries no text.
        """
        contents = [types.Content(role="user", parts=[self._to_part(p) for p in parts])]
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=kwargs.get("temperature"),
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as exc:
            raise RuntimeError(f"Gemini API error: {str(exc)}") from exc

        text = getattr(response, "text", None)
        if not text:
            raise RuntimeError("LLM returned empty response")
        return text.strip()
