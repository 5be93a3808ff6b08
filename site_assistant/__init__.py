"""
Site Assistant - chat proxy and widget for the JV Solutions website.

This package relays visitor questions to an OpenAI or Azure OpenAI
chat-completion endpoint under a fixed system prompt and maps every
failure to a fixed, user-safe response.
"""

from site_assistant.assistant import ChatAssistant, validate_message
from site_assistant.logging import get_logger, configure_logging, StructuredLogger, LogLevel
from site_assistant.exceptions import (
    AssistantError,
    ValidationError,
    MessageRequiredError,
    MessageTooLongError,
    RateLimitError,
    ConfigurationError,
    UpstreamError,
    UpstreamTimeoutError,
    EmptyReplyError,
    get_status_code,
    get_user_message,
)
from site_assistant.model import (
    ChatProvider,
    OpenAIProvider,
    AzureOpenAIProvider,
    build_provider,
)
from site_assistant.ratelimit import FixedWindowRateLimiter, RateLimitDecision
from site_assistant.widget import ChatWidget, TranscriptEntry, WidgetState

__version__ = "0.1.0"
__all__ = [
    # Core
    "ChatAssistant",
    "validate_message",
    # Providers
    "ChatProvider",
    "OpenAIProvider",
    "AzureOpenAIProvider",
    "build_provider",
    # Rate limiting
    "FixedWindowRateLimiter",
    "RateLimitDecision",
    # Widget
    "ChatWidget",
    "TranscriptEntry",
    "WidgetState",
    # Logging
    "get_logger",
    "configure_logging",
    "StructuredLogger",
    "LogLevel",
    # Exceptions
    "AssistantError",
    "ValidationError",
    "MessageRequiredError",
    "MessageTooLongError",
    "RateLimitError",
    "ConfigurationError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "EmptyReplyError",
    "get_status_code",
    "get_user_message",
]
