from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Sequence, Union


@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class InlineDataPart:
    """Binary attachment sent inline, as base64 text."""

    data: str
    mime_type: str


ChatPart = Union[TextPart, InlineDataPart]


class AbstractLLMClient(ABC):
    """Interface for LLM clients that answer a single multimodal user turn."""

    @abstractmethod
    async def generate_reply(
        self,
        system_prompt: str,
        parts: Sequence[ChatPart],
        **kwargs: Any,
    ) -> str:
        """Generate a text reply for one user turn.

        Args:
            system_prompt: Instruction sent ahead of the user turn.
            parts: Text and inline image parts of the user turn.
            **kwargs: Provider-specific options (e.g., temperature).

        Returns:
            str: The model's reply text.

        Raises:
            RuntimeError: If the provider call fails or returns no text.
        """
        ...
