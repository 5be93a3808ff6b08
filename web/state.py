"""Application state shared by the request handlers."""

from dataclasses import dataclass

from fastapi import Request

from site_assistant import ChatAssistant, FixedWindowRateLimiter
from site_assistant.config import Settings


@dataclass
class AppState:
    """
    Everything a request handler needs, built once in ``create_app``.

    Stored on ``app.state.site`` and handed to routes through
    ``get_app_state`` so nothing lives in module globals.
    """
    settings: Settings
    assistant: ChatAssistant
    limiter: FixedWindowRateLimiter


def get_app_state(request: Request) -> AppState:
    """FastAPI dependency returning the app's state container."""
    return request.app.state.site
