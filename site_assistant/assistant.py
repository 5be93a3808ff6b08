"""Chat proxy core: validate a message, ask the provider, enforce the deadline."""

import asyncio
from typing import Any, Optional

from site_assistant.config.prompts import get_system_prompt
from site_assistant.config.settings import ChatSettings
from site_assistant.exceptions import (
    ConfigurationError,
    EmptyReplyError,
    MessageRequiredError,
    MessageTooLongError,
    UpstreamTimeoutError,
)
from site_assistant.logging import get_logger
from site_assistant.model import ChatProvider

# Module logger
logger = get_logger("assistant")


def validate_message(message: Any, max_length: int = 1000) -> str:
    """
    Trim and check a user message.

    Args:
        message: Raw ``message`` value from the request body.
        max_length: Longest accepted message after trimming.

    Returns:
        The trimmed message.

    Raises:
        MessageRequiredError: Missing, not a string, or blank.
        MessageTooLongError: Longer than ``max_length``.
    """
    if not isinstance(message, str) or not message.strip():
        raise MessageRequiredError()
    text = message.strip()
    if len(text) > max_length:
        raise MessageTooLongError(length=len(text), max_length=max_length)
    return text


class ChatAssistant:
    """
    Relays one user message to the configured provider.

    Holds no per-request state; a single instance serves every request.

    Args:
        provider: Selected provider, or None when nothing is configured.
        chat: Timeout and size limits.
        system_prompt: Instruction sent ahead of every message.
    """

    def __init__(
        self,
        provider: Optional[ChatProvider],
        chat: Optional[ChatSettings] = None,
        system_prompt: Optional[str] = None,
    ):
        self.provider = provider
        self.chat = chat or ChatSettings()
        self.system_prompt = system_prompt or get_system_prompt()

    @property
    def configured(self) -> bool:
        return self.provider is not None

    async def reply(self, message: Any) -> str:
        """
        Produce the assistant's reply for a single message.

        The provider is called exactly once. When the deadline passes the
        in-flight call is cancelled, which closes its HTTP client.

        Raises:
            ValidationError: The message was rejected before any upstream call.
            ConfigurationError: No provider is configured.
            UpstreamTimeoutError: Deadline exceeded.
            EmptyReplyError: The provider returned no text.
            UpstreamError: Any other provider failure.
        """
        text = validate_message(message, self.chat.max_message_length)

        if self.provider is None:
            raise ConfigurationError("Missing provider configuration")

        logger.debug("Forwarding chat message", provider=self.provider.name, length=len(text))
        try:
            reply = await asyncio.wait_for(
                self.provider.complete(self.system_prompt, text),
                timeout=self.chat.request_timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpstreamTimeoutError(
                "Upstream call exceeded deadline",
                provider=self.provider.name,
                timeout_ms=self.chat.request_timeout_ms,
            ) from e

        reply = (reply or "").strip()
        if not reply:
            raise EmptyReplyError("Provider returned an empty completion", provider=self.provider.name)
        return reply
