"""Web package for the JV Solutions site."""

from web.state import AppState, get_app_state
from web.models import ChatRequest, ChatReply, ErrorReply, StatusReply
from web.chat import router as chat_router

__all__ = [
    "AppState",
    "get_app_state",
    "ChatRequest",
    "ChatReply",
    "ErrorReply",
    "StatusReply",
    "chat_router",
]
