"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports the settings module so
the global settings instance is built from test values.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "gemini")
os.environ.setdefault("LLM_MODEL", "gemini-1.5-flash")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("APP_RATE_LIMIT_MAX", "30")
os.environ.setdefault("APP_RATE_LIMIT_WINDOW_MS", "60000")

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from fastapi.testclient import TestClient

from chat_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from chat_api.core.app_factory import create_app
from chat_api.services.chat_service import ChatService


@pytest.fixture
def clock() -> Mock:
    """Controllable millisecond clock starting at t=0."""
    return Mock(return_value=0)


@pytest.fixture
def limiter(clock: Mock) -> InMemoryFixedWindowRateLimiter:
    return InMemoryFixedWindowRateLimiter(clock=clock)


@pytest.fixture
def mock_llm() -> MagicMock:
    llm = MagicMock()
    llm.generate_reply = AsyncMock(return_value="decoded: meet at the north gate")
    return llm


@pytest.fixture
def client(limiter: InMemoryFixedWindowRateLimiter, mock_llm: MagicMock) -> TestClient:
    """Test client for an isolated app with a fake LLM and a controllable limiter."""
    app = create_app(
        rate_limiter=limiter,
        chat_service=ChatService(llm=mock_llm),
    )
    return TestClient(app)
