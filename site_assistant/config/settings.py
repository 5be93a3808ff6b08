"""
Unified configuration management for the site assistant.

Supports loading from:
- Environment variables (.env)
- YAML config files (config.yaml)
- Programmatic overrides

Priority (highest to lowest):
1. Programmatic overrides
2. Environment variables
3. YAML config files
4. Default values

Usage:
    from site_assistant.config import settings

    settings.chat.request_timeout
    settings.azure.configured

    # Reload from files
    settings.reload()
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from site_assistant.logging import get_logger

logger = get_logger("config")


# =============================================================================
# Configuration Dataclasses
# =============================================================================

@dataclass
class OpenAISettings:
    """Default provider (OpenAI chat completions)."""
    api_key: str = ""
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class AzureSettings:
    """Azure OpenAI provider. Selected when endpoint, key and deployment are set."""
    endpoint: str = ""
    api_key: str = ""
    deployment: str = ""
    api_version: str = "2024-02-15-preview"

    @property
    def configured(self) -> bool:
        return bool(self.endpoint and self.api_key and self.deployment)


@dataclass
class ChatSettings:
    """Chat proxy behaviour."""
    request_timeout_ms: int = 10000
    temperature: float = 0.4
    max_tokens: int = 250
    max_message_length: int = 1000
    rate_limit_max: int = 20
    rate_limit_window_ms: int = 60 * 1000

    @property
    def request_timeout(self) -> float:
        """Upstream deadline in seconds."""
        return self.request_timeout_ms / 1000

    @property
    def rate_limit_window(self) -> float:
        return self.rate_limit_window_ms / 1000


@dataclass
class WebSettings:
    """HTTP server configuration."""
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    max_body_bytes: int = 20 * 1024


@dataclass
class LogSettings:
    """Logging configuration."""
    level: str = "INFO"
    json_format: bool = False


def _parse_bool(val: str) -> bool:
    return val.lower() in ("true", "1", "yes")


def _parse_int(name: str, val: str, default: int) -> int:
    """Integer env value; malformed input keeps ``default``."""
    try:
        return int(val)
    except ValueError:
        logger.warn("Ignoring non-integer environment value", name=name, value=val, default=default)
        return default


@dataclass
class Settings:
    """
    Main settings container.

    Resolved once at startup and handed to the app by reference.
    """
    openai: OpenAISettings = field(default_factory=OpenAISettings)
    azure: AzureSettings = field(default_factory=AzureSettings)
    chat: ChatSettings = field(default_factory=ChatSettings)
    web: WebSettings = field(default_factory=WebSettings)
    log: LogSettings = field(default_factory=LogSettings)

    # Internal state
    _config_file: Optional[Path] = None
    _load_sources: bool = True

    def __post_init__(self):
        """Load configuration after initialization."""
        if self._load_sources:
            self._load_from_yaml()
            self._load_from_env()

    def _load_from_env(self):
        """Load settings from environment variables."""
        load_dotenv(find_dotenv(usecwd=True))

        # Default provider
        if val := os.getenv("OPENAI_API_KEY"):
            self.openai.api_key = val
        if val := os.getenv("OPENAI_MODEL"):
            self.openai.model = val
        if val := os.getenv("OPENAI_BASE_URL"):
            self.openai.base_url = val

        # Azure provider
        if val := os.getenv("AZURE_OPENAI_ENDPOINT"):
            self.azure.endpoint = val
        if val := os.getenv("AZURE_OPENAI_API_KEY"):
            self.azure.api_key = val
        if val := os.getenv("AZURE_OPENAI_DEPLOYMENT"):
            self.azure.deployment = val
        if val := os.getenv("AZURE_OPENAI_API_VERSION"):
            self.azure.api_version = val

        # Chat settings
        if val := os.getenv("AI_REQUEST_TIMEOUT_MS"):
            self.chat.request_timeout_ms = _parse_int("AI_REQUEST_TIMEOUT_MS", val, self.chat.request_timeout_ms)

        # Web settings
        if val := os.getenv("HOST"):
            self.web.host = val
        if val := os.getenv("PORT"):
            self.web.port = _parse_int("PORT", val, self.web.port)
        if val := os.getenv("DEBUG"):
            self.web.debug = _parse_bool(val)

        # Log settings
        if val := os.getenv("LOG_LEVEL"):
            self.log.level = val.upper()
        if val := os.getenv("LOG_JSON"):
            self.log.json_format = _parse_bool(val)

    def _load_from_yaml(self):
        """Load settings from the first YAML config file found."""
        search_paths = [
            Path.cwd() / "config.yaml",
            Path.cwd() / "config.yml",
            Path.home() / ".jv-site" / "config.yaml",
        ]

        for config_path in search_paths:
            if config_path.exists():
                self._config_file = config_path
                self._apply_yaml_config(config_path)
                break

    def _apply_yaml_config(self, path: Path):
        """Apply config from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        for section_name in ("openai", "azure", "chat", "web", "log"):
            section = data.get(section_name)
            if not section:
                continue
            target = getattr(self, section_name)
            for key, val in section.items():
                if hasattr(target, key):
                    setattr(target, key, val)

    @property
    def provider_name(self) -> Optional[str]:
        """Name of the provider requests will be routed to, if any."""
        if self.azure.configured:
            return "azure"
        if self.openai.configured:
            return "openai"
        return None

    def reload(self):
        """Reload configuration from all sources."""
        self.openai = OpenAISettings()
        self.azure = AzureSettings()
        self.chat = ChatSettings()
        self.web = WebSettings()
        self.log = LogSettings()
        self._config_file = None

        self._load_from_yaml()
        self._load_from_env()

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            "provider": self.provider_name,
            "openai": {
                "model": self.openai.model,
                "base_url": self.openai.base_url,
                # Exclude api_key for security
            },
            "azure": {
                "endpoint": self.azure.endpoint,
                "deployment": self.azure.deployment,
                "api_version": self.azure.api_version,
            },
            "chat": {
                "request_timeout_ms": self.chat.request_timeout_ms,
                "temperature": self.chat.temperature,
                "max_tokens": self.chat.max_tokens,
                "max_message_length": self.chat.max_message_length,
                "rate_limit_max": self.chat.rate_limit_max,
                "rate_limit_window_ms": self.chat.rate_limit_window_ms,
            },
            "web": {
                "host": self.web.host,
                "port": self.web.port,
                "debug": self.web.debug,
                "max_body_bytes": self.web.max_body_bytes,
            },
            "log": {
                "level": self.log.level,
                "json_format": self.log.json_format,
            },
        }

    def __repr__(self) -> str:
        return f"Settings(config_file={self._config_file}, provider={self.provider_name})"


# =============================================================================
# Global Settings Instance
# =============================================================================

settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
