"""Tests for the LLM adapter layer with mocked provider SDK calls."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from chat_api.adapters.llm import GeminiClient, InlineDataPart, OpenAIClient, TextPart, create_llm_client
from chat_api.core.config import LLMSettings
from chat_api.core.errors import ValidationAppError


class TestGeminiClient:
    @pytest.mark.asyncio
    async def test_generate_reply_success(self) -> None:
        client = GeminiClient(api_key="test-key", model="gemini-1.5-flash")
        mock_response = MagicMock(text="  the base is empty  ")

        with patch.object(
            client.client.aio.models,
            "generate_content",
            new_callable=AsyncMock,
            return_value=mock_response,
        ) as mock_generate:
            reply = await client.generate_reply(
                "decode the cipher",
                [TextPart(text="긻짌"), InlineDataPart(data="QUJD", mime_type="image/png")],
                temperature=0.2,
            )

        assert reply == "the base is empty"
        kwargs = mock_generate.await_args.kwargs
        assert kwargs["model"] == "gemini-1.5-flash"
        assert kwargs["config"].system_instruction == "decode the cipher"
        assert kwargs["config"].temperature == 0.2

        content = kwargs["contents"][0]
        assert content.role == "user"
        assert content.parts[0].text == "긻짌"
        assert content.parts[1].inline_data.data == b"ABC"
        assert content.parts[1].inline_data.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_api_error_raises_runtime_error(self) -> None:
        client = GeminiClient(api_key="test-key", model="gemini-1.5-flash")

        with patch.object(
            client.client.aio.models,
            "generate_content",
            new_callable=AsyncMock,
            side_effect=Exception("quota exceeded"),
        ):
            with pytest.raises(RuntimeError, match="Gemini API error"):
                await client.generate_reply("p", [TextPart(text="hi")])

    @pytest.mark.asyncio
    async def test_empty_response_raises_runtime_error(self) -> None:
        client = GeminiClient(api_key="test-key", model="gemini-1.5-flash")

        with patch.object(
            client.client.aio.models,
            "generate_content",
            new_callable=AsyncMock,
            return_value=MagicMock(text=None),
        ):
            with pytest.raises(RuntimeError, match="empty response"):
                await client.generate_reply("p", [TextPart(text="hi")])

    @pytest.mark.asyncio
    async def test_invalid_base64_raises_runtime_error(self) -> None:
        client = GeminiClient(api_key="test-key", model="gemini-1.5-flash")

        with pytest.raises(RuntimeError, match="base64"):
            await client.generate_reply("p", [InlineDataPart(data="QUJ", mime_type="image/png")])


class TestOpenAIClient:
    @pytest.mark.asyncio
    async def test_generate_reply_builds_multimodal_message(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")
        mock_response = MagicMock()
        mock_response.choices = [MagicMock(message=MagicMock(content=" hello "))]

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=mock_response,
        ) as mock_create:
            reply = await client.generate_reply(
                "system text",
                [TextPart(text="what is this"), InlineDataPart(data="QUJD", mime_type="image/jpeg")],
                temperature=None,
                max_tokens=256,
            )

        assert reply == "hello"
        params = mock_create.await_args.kwargs
        assert params["model"] == "gpt-4o-mini"
        assert params["max_tokens"] == 256
        assert "temperature" not in params
        assert params["messages"][0] == {"role": "system", "content": "system text"}
        assert params["messages"][1]["content"] == [
            {"type": "text", "text": "what is this"},
            {"type": "image_url", "image_url": {"url": "data:image/jpeg;base64,QUJD"}},
        ]

    @pytest.mark.asyncio
    async def test_api_error_raises_runtime_error(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=Exception("Connection timeout"),
        ):
            with pytest.raises(RuntimeError, match="OpenAI API error"):
                await client.generate_reply("p", [TextPart(text="hi")])

    @pytest.mark.asyncio
    async def test_empty_content_raises_runtime_error(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")
        mock_response = MagicMock()
        mock_response.choices = [MagicMock(message=MagicMock(content=None))]

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=mock_response,
        ):
            with pytest.raises(RuntimeError, match="empty response"):
                await client.generate_reply("p", [TextPart(text="hi")])


class TestFactory:
    def test_creates_gemini_client_by_default(self) -> None:
        client = create_llm_client(LLMSettings(api_key="k"))

        assert isinstance(client, GeminiClient)
        assert client.model == "gemini-1.5-flash"

    def test_creates_openai_client(self) -> None:
        client = create_llm_client(
            LLMSettings(provider="OpenAI", model="gpt-4o-mini", api_key="k", base_url="http://localhost:8080/v1")
        )

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o-mini"

    def test_missing_api_key(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(LLMSettings(provider="gemini", api_key=None))

        assert exc_info.value.code == "llm_missing_api_key"

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            create_llm_client(LLMSettings(provider="anthropic", api_key="k"))

        assert exc_info.value.code == "llm_unknown_provider"
        assert "gemini" in exc_info.value.message
