"""Pydantic schemas for the chat endpoint."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chat_api.core.config import settings


class ChatMessage(BaseModel):
    """One turn of the conversation as sent by the browser.

    A message must carry either non-blank text or an inline image; the image
    data and its MIME type always travel together.
    """

    model_config = ConfigDict(populate_by_name=True)

    role: Literal["user", "model"] = Field(
        ...,
        description="Who authored the message.",
    )
    content: str = Field(
        "",
        max_length=settings.app.max_content_chars,
        description="Message text.",
    )
    image_base64: str | None = Field(
        None,
        alias="imageBase64",
        pattern=r"^[A-Za-z0-9+/=]+$",
        description="Inline image as raw base64 (no data: URL prefix).",
    )
    image_mime_type: str | None = Field(
        None,
        alias="imageMimeType",
        pattern=r"^image/",
        description="MIME type of the inline image, e.g. image/png.",
    )

    @model_validator(mode="after")
    def _check_content_or_image(self) -> "ChatMessage":
        if bool(self.image_base64) != bool(self.image_mime_type):
            raise ValueError("imageBase64 and imageMimeType must be provided together")
        if not self.content.strip() and not self.has_image:
            raise ValueError("Either non-empty content or a valid image must be provided")
        return self

    @property
    def has_text(self) -> bool:
        return bool(self.content.strip())

    @property
    def has_image(self) -> bool:
        return bool(self.image_base64 and self.image_mime_type)


class ChatRequest(BaseModel):
    """Chat request body."""

    messages: list[ChatMessage] = Field(
        ...,
        min_length=1,
        max_length=settings.app.max_messages,
        description="Conversation so far; only the last message is sent to the model.",
    )


class ChatResponse(BaseModel):
    """Model reply plus the caller's remaining quota in the current window."""

    reply: str = Field(..., description="Text generated by the model.")
    remaining: int | None = Field(
        None,
        ge=0,
        description="Admissions left in the caller's rate limit window (null when rate limiting is off).",
    )
