"""Chat-completion providers: OpenAI and Azure OpenAI behind one interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI

from site_assistant.config.settings import (
    AzureSettings,
    ChatSettings,
    OpenAISettings,
    Settings,
)
from site_assistant.exceptions import UpstreamError, UpstreamTimeoutError
from site_assistant.logging import get_logger

# Module logger
logger = get_logger("model")


class MessageBuilder:
    """Helper class for building conversation messages."""

    @staticmethod
    def create_system_message(content: str) -> dict[str, Any]:
        """Create a system message."""
        return {"role": "system", "content": content}

    @staticmethod
    def create_user_message(text: str) -> dict[str, Any]:
        """Create a user message."""
        return {"role": "user", "content": text}

    @classmethod
    def build_exchange(cls, system_prompt: str, user_message: str) -> list[dict[str, Any]]:
        """The two-message exchange sent for every chat request."""
        return [
            cls.create_system_message(system_prompt),
            cls.create_user_message(user_message),
        ]


def extract_reply(completion: Any) -> str:
    """
    Pull the first choice's text out of a completion.

    Responses are parsed leniently, so any missing level (no choices, no
    message, null content) yields an empty string rather than an error.
    """
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str):
        return ""
    return content.strip()


class ChatProvider(ABC):
    """
    A chat-completion backend.

    Each call opens its own SDK client inside ``async with`` so the
    underlying connection is released on success, failure and cancellation.

    Args:
        chat: Completion parameters and request timeout.
        transport: Optional httpx transport (used to stub the network in tests).
    """

    name: str = "provider"
    label: str = "AI provider"

    def __init__(
        self,
        chat: Optional[ChatSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.chat = chat or ChatSettings()
        self._transport = transport

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.chat.request_timeout)

    @abstractmethod
    def _create_client(self) -> AsyncOpenAI:
        """Build the SDK client for a single request."""

    @abstractmethod
    def _model(self) -> str:
        """Model (or deployment) name sent with the request."""

    async def complete(self, system_prompt: str, user_message: str) -> str:
        """
        Send the system prompt and user message, return the trimmed reply.

        Returns:
            The completion text, or "" when the provider sent none.

        Raises:
            UpstreamTimeoutError: The provider did not answer in time.
            UpstreamError: Non-2xx status, network fault or unreadable body.
        """
        messages = MessageBuilder.build_exchange(system_prompt, user_message)

        async with self._create_client() as client:
            try:
                completion = await client.chat.completions.create(
                    model=self._model(),
                    messages=messages,
                    temperature=self.chat.temperature,
                    max_tokens=self.chat.max_tokens,
                )
            except openai.APITimeoutError as e:
                raise UpstreamTimeoutError(f"{self.label} timed out", provider=self.name) from e
            except openai.APIStatusError as e:
                raise UpstreamError(
                    f"{self.label} error: {e.message}",
                    provider=self.name,
                    status=e.status_code,
                ) from e
            except (openai.APIError, ValueError) as e:
                raise UpstreamError(f"{self.label} error: {e}", provider=self.name) from e

        return extract_reply(completion)

    @property
    def model_name(self) -> str:
        return self._model()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model_name!r})"


class OpenAIProvider(ChatProvider):
    """Default provider: ``POST {base_url}/chat/completions`` with bearer auth."""

    name = "openai"
    label = "OpenAI"

    def __init__(
        self,
        config: OpenAISettings,
        chat: Optional[ChatSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(chat, transport)
        self.config = config

    def _create_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url,
            timeout=self.chat.request_timeout,
            max_retries=0,
            http_client=self._http_client(),
        )

    def _model(self) -> str:
        return self.config.model


class AzureOpenAIProvider(ChatProvider):
    """
    Azure-style provider.

    Requests go to ``{endpoint}/openai/deployments/{deployment}/chat/completions``
    with the ``api-version`` query parameter and an ``api-key`` header.
    """

    name = "azure"
    label = "Azure OpenAI"

    def __init__(
        self,
        config: AzureSettings,
        chat: Optional[ChatSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(chat, transport)
        self.config = config

    def _create_client(self) -> AsyncOpenAI:
        return AsyncAzureOpenAI(
            azure_endpoint=self.config.endpoint.rstrip("/"),
            azure_deployment=self.config.deployment,
            api_key=self.config.api_key,
            api_version=self.config.api_version,
            timeout=self.chat.request_timeout,
            max_retries=0,
            http_client=self._http_client(),
        )

    def _model(self) -> str:
        return self.config.deployment


def build_provider(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[ChatProvider]:
    """
    Select the provider from configuration.

    Azure wins when its endpoint, key and deployment are all present;
    otherwise OpenAI is used when an API key is set. Returns None when
    neither is configured.
    """
    if settings.azure.configured:
        provider: Optional[ChatProvider] = AzureOpenAIProvider(settings.azure, settings.chat, transport)
    elif settings.openai.configured:
        provider = OpenAIProvider(settings.openai, settings.chat, transport)
    else:
        provider = None

    if provider is None:
        logger.warn("No AI provider configured; chat requests will be rejected")
    else:
        logger.info("AI provider selected", provider=provider.name, model=provider.model_name)
    return provider
