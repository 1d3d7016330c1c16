"""Chat service turning a validated conversation into a model reply.

Only the last message of the conversation is forwarded, together with the
configured system prompt. The service:
- enforces the inline image size limit
- builds provider-neutral text/image parts
- converts provider failures into LLMAppError
"""

from __future__ import annotations

import logging
import time
from typing import Sequence

from chat_api.adapters.llm.base import AbstractLLMClient, ChatPart, InlineDataPart, TextPart
from chat_api.core.config import settings
from chat_api.core.errors import LLMAppError, PayloadTooLargeAppError, ValidationAppError
from chat_api.core.prompts import PROMPT_VERSION
from chat_api.schemas.chat import ChatMessage

logger = logging.getLogger(__name__)


def build_user_parts(message: ChatMessage) -> list[ChatPart]:
    """Convert a chat message into model input parts (text first, then image)."""

    parts: list[ChatPart] = []
    if message.has_text:
        parts.append(TextPart(text=message.content))
    if message.has_image:
        parts.append(InlineDataPart(data=message.image_base64, mime_type=message.image_mime_type))
    return parts


class ChatService:
    """Forward the latest user turn to the LLM and return its reply."""

    def __init__(
        self,
        llm: AbstractLLMClient,
        *,
        system_prompt: str | None = None,
        max_image_base64_chars: int | None = None,
        temperature: float | None = None,
    ) -> None:
        self.llm = llm
        self.system_prompt = system_prompt or settings.app.system_prompt
        self.max_image_base64_chars = max_image_base64_chars or settings.app.max_image_base64_chars
        self.temperature = temperature if temperature is not None else settings.llm.temperature

    def _check_image_size(self, message: ChatMessage) -> None:
        if not message.image_base64:
            return
        size = len(message.image_base64)
        if size > self.max_image_base64_chars:
            raise PayloadTooLargeAppError(
                code="image_too_large",
                message="Image too large. Max ~6MB base64.",
                details={
                    "max_value": self.max_image_base64_chars,
                    "actual_value": size,
                },
            )

    async def reply(self, messages: Sequence[ChatMessage]) -> str:
        """Generate the model reply for a conversation.

        Args:
            messages: Validated conversation; must be non-empty.

        Returns:
            Reply text from the model.

        Raises:
            ValidationAppError: If there is no message to answer.
            PayloadTooLargeAppError: If the inline image exceeds the size limit.
            LLMAppError: If the provider call fails.
        """
        if not messages:
            raise ValidationAppError(code="empty_conversation", message="No messages provided")

        last = messages[-1]
        self._check_image_size(last)
        parts = build_user_parts(last)

        start = time.perf_counter()
        try:
            reply = await self.llm.generate_reply(
                self.system_prompt,
                parts,
                temperature=self.temperature,
            )
        except RuntimeError as exc:
            logger.error(
                "chat.llm_failed",
                extra={
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                    "prompt_version": PROMPT_VERSION,
                },
            )
            raise LLMAppError(
                code="llm_request_failed",
                message="The model could not generate a reply.",
            ) from exc

        logger.info(
            "chat.reply",
            extra={
                "message_count": len(messages),
                "has_text": last.has_text,
                "has_image": last.has_image,
                "reply_chars": len(reply),
                "prompt_version": PROMPT_VERSION,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
            },
        )
        return reply
