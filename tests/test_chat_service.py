"""Unit tests for ChatService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from chat_api.adapters.llm.base import InlineDataPart, TextPart
from chat_api.core.errors import LLMAppError, PayloadTooLargeAppError, ValidationAppError
from chat_api.schemas.chat import ChatMessage
from chat_api.services.chat_service import ChatService, build_user_parts


class TestBuildUserParts:
    def test_text_only(self) -> None:
        parts = build_user_parts(ChatMessage(role="user", content="hello"))

        assert parts == [TextPart(text="hello")]

    def test_text_and_image(self) -> None:
        message = ChatMessage(role="user", content="read this", image_base64="QUJD", image_mime_type="image/png")

        assert build_user_parts(message) == [
            TextPart(text="read this"),
            InlineDataPart(data="QUJD", mime_type="image/png"),
        ]

    def test_blank_text_dropped_when_image_present(self) -> None:
        message = ChatMessage(role="user", content="   ", image_base64="QUJD", image_mime_type="image/png")

        assert build_user_parts(message) == [InlineDataPart(data="QUJD", mime_type="image/png")]


class TestChatServiceReply:
    @pytest.mark.asyncio
    async def test_uses_last_message_and_system_prompt(self, mock_llm: MagicMock) -> None:
        service = ChatService(llm=mock_llm, system_prompt="decode it", temperature=0.3)
        messages = [
            ChatMessage(role="user", content="old question"),
            ChatMessage(role="model", content="old answer"),
            ChatMessage(role="user", content="new question"),
        ]

        reply = await service.reply(messages)

        assert reply == "decoded: meet at the north gate"
        mock_llm.generate_reply.assert_awaited_once_with(
            "decode it",
            [TextPart(text="new question")],
            temperature=0.3,
        )

    def test_defaults_to_configured_prompt(self, mock_llm: MagicMock) -> None:
        from chat_api.core.config import settings

        service = ChatService(llm=mock_llm)

        assert service.system_prompt == settings.app.system_prompt
        assert service.max_image_base64_chars == settings.app.max_image_base64_chars

    @pytest.mark.asyncio
    async def test_rejects_oversized_image(self, mock_llm: MagicMock) -> None:
        service = ChatService(llm=mock_llm, max_image_base64_chars=8)
        message = ChatMessage(role="user", image_base64="QUJDREVGR0hJ", image_mime_type="image/png")

        with pytest.raises(PayloadTooLargeAppError) as exc_info:
            await service.reply([message])

        assert exc_info.value.code == "image_too_large"
        assert exc_info.value.details == {"max_value": 8, "actual_value": 12}
        mock_llm.generate_reply.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_image_at_limit_is_accepted(self, mock_llm: MagicMock) -> None:
        service = ChatService(llm=mock_llm, max_image_base64_chars=12)
        message = ChatMessage(role="user", image_base64="QUJDREVGR0hJ", image_mime_type="image/png")

        assert await service.reply([message]) == "decoded: meet at the north gate"

    @pytest.mark.asyncio
    async def test_only_last_image_is_size_checked(self, mock_llm: MagicMock) -> None:
        service = ChatService(llm=mock_llm, max_image_base64_chars=4)
        messages = [
            ChatMessage(role="user", image_base64="QUJDREVGR0hJ", image_mime_type="image/png"),
            ChatMessage(role="user", content="and now?"),
        ]

        await service.reply(messages)

        mock_llm.generate_reply.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_wraps_provider_errors(self) -> None:
        llm = MagicMock()
        llm.generate_reply = AsyncMock(side_effect=RuntimeError("Gemini API error: 503"))
        service = ChatService(llm=llm)

        with pytest.raises(LLMAppError) as exc_info:
            await service.reply([ChatMessage(role="user", content="hi")])

        assert exc_info.value.code == "llm_request_failed"
        assert "503" not in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_conversation_rejected(self, mock_llm: MagicMock) -> None:
        service = ChatService(llm=mock_llm)

        with pytest.raises(ValidationAppError):
            await service.reply([])
