"""Model client module for chat-completion providers."""

from site_assistant.model.client import (
    AzureOpenAIProvider,
    ChatProvider,
    MessageBuilder,
    OpenAIProvider,
    build_provider,
    extract_reply,
)

__all__ = [
    "AzureOpenAIProvider",
    "ChatProvider",
    "MessageBuilder",
    "OpenAIProvider",
    "build_provider",
    "extract_reply",
]
