"""
Pytest configuration and shared fixtures.
"""
import asyncio
import sys
from pathlib import Path
from typing import Optional

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


# =============================================================================
# Fake provider
# =============================================================================

class FakeProvider:
    """
    Stand-in for a ChatProvider that records calls.

    Args:
        reply: Text returned by ``complete``.
        error: Exception raised instead of replying.
        delay: Seconds to wait before replying.
    """

    name = "fake"
    model_name = "fake-model"

    def __init__(self, reply: str = "Hello there.", error: Optional[Exception] = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.cancelled = False

    async def complete(self, system_prompt: str, user_message: str) -> str:
        self.calls.append((system_prompt, user_message))
        if self.delay:
            try:
                await asyncio.sleep(self.delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.error is not None:
            raise self.error
        return self.reply


# =============================================================================
# Settings fixtures
# =============================================================================

@pytest.fixture
def settings():
    """Settings with defaults only (no env, YAML or .env)."""
    from site_assistant.config import Settings
    return Settings(_load_sources=False)


@pytest.fixture
def chat_settings():
    """Chat settings with a short deadline for timeout tests."""
    from site_assistant.config import ChatSettings
    return ChatSettings(request_timeout_ms=100)


# =============================================================================
# Provider fixtures
# =============================================================================

@pytest.fixture
def provider_factory():
    """The FakeProvider class, for tests that need custom behaviour."""
    return FakeProvider


@pytest.fixture
def fake_provider():
    """A provider that answers with padded text."""
    return FakeProvider(reply="  Hello there.  ")


@pytest.fixture
def completion_payload():
    """Upstream chat-completion body with surrounding whitespace."""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": [{
            "index": 0,
            "finish_reason": "stop",
            "message": {"role": "assistant", "content": "  Hello there.  "},
        }],
    }


# =============================================================================
# App fixtures
# =============================================================================

@pytest.fixture
def make_client(settings):
    """Build a TestClient around an app wired to the given provider."""
    from fastapi.testclient import TestClient

    from site_assistant import ChatAssistant, FixedWindowRateLimiter
    from web_app import create_app

    def _make(provider=None, chat=None, limiter=None):
        chat = chat or settings.chat
        assistant = ChatAssistant(provider, chat)
        limiter = limiter or FixedWindowRateLimiter(max_requests=20, window_seconds=60)
        return TestClient(create_app(settings=settings, assistant=assistant, limiter=limiter))

    return _make
