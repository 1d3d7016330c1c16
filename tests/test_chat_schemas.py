"""Validation rules of the chat request schema."""

import pytest
from pydantic import ValidationError

from chat_api.schemas.chat import ChatMessage, ChatRequest, ChatResponse


def test_text_message_is_valid() -> None:
    message = ChatMessage(role="user", content="hello")

    assert message.has_text is True
    assert message.has_image is False


def test_image_message_accepts_camel_case_aliases() -> None:
    message = ChatMessage.model_validate(
        {"role": "user", "imageBase64": "QUJD", "imageMimeType": "image/jpeg"}
    )

    assert message.image_base64 == "QUJD"
    assert message.image_mime_type == "image/jpeg"
    assert message.has_image is True
    assert message.has_text is False


def test_image_message_accepts_field_names() -> None:
    message = ChatMessage(role="model", content="", image_base64="QUJD", image_mime_type="image/webp")

    assert message.has_image is True


def test_blank_message_without_image_rejected() -> None:
    with pytest.raises(ValidationError, match="non-empty content"):
        ChatMessage(role="user", content="  \n ")


@pytest.mark.parametrize(
    "fields",
    [
        {"imageBase64": "QUJD"},
        {"imageMimeType": "image/png"},
    ],
)
def test_image_fields_required_together(fields: dict) -> None:
    with pytest.raises(ValidationError, match="provided together"):
        ChatMessage.model_validate({"role": "user", "content": "caption", **fields})


def test_image_base64_charset_enforced() -> None:
    with pytest.raises(ValidationError):
        ChatMessage.model_validate(
            {"role": "user", "imageBase64": "data:image/png;base64,QUJD", "imageMimeType": "image/png"}
        )


def test_image_mime_type_must_be_image() -> None:
    with pytest.raises(ValidationError):
        ChatMessage.model_validate(
            {"role": "user", "imageBase64": "QUJD", "imageMimeType": "application/pdf"}
        )


def test_content_length_limit() -> None:
    ChatMessage(role="user", content="x" * 8000)
    with pytest.raises(ValidationError):
        ChatMessage(role="user", content="x" * 8001)


def test_request_requires_between_one_and_fifty_messages() -> None:
    message = {"role": "user", "content": "hi"}

    with pytest.raises(ValidationError):
        ChatRequest.model_validate({"messages": []})
    with pytest.raises(ValidationError):
        ChatRequest.model_validate({"messages": [message] * 51})

    assert len(ChatRequest.model_validate({"messages": [message] * 50}).messages) == 50


def test_response_remaining_cannot_be_negative() -> None:
    with pytest.raises(ValidationError):
        ChatResponse(reply="ok", remaining=-1)
