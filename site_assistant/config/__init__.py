"""Configuration and approved copy."""

from site_assistant.config.prompts import (
    FALLBACK_REPLIES,
    SYSTEM_PROMPT,
    THINKING_PLACEHOLDER,
    get_system_prompt,
)
from site_assistant.config.settings import (
    AzureSettings,
    ChatSettings,
    LogSettings,
    OpenAISettings,
    Settings,
    WebSettings,
    get_settings,
    settings,
)

__all__ = [
    "AzureSettings",
    "ChatSettings",
    "LogSettings",
    "OpenAISettings",
    "Settings",
    "WebSettings",
    "get_settings",
    "settings",
    "FALLBACK_REPLIES",
    "SYSTEM_PROMPT",
    "THINKING_PLACEHOLDER",
    "get_system_prompt",
]
