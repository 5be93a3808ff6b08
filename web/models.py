"""Pydantic models for API requests/responses."""

from typing import Optional

from pydantic import BaseModel


class ChatRequest(BaseModel):
    """Request body for the chat endpoint. Presence and length are checked by the assistant."""
    message: Optional[str] = None


class ChatReply(BaseModel):
    """Successful chat response."""
    reply: str


class ErrorReply(BaseModel):
    """Error body for every non-2xx chat response."""
    error: str


class StatusReply(BaseModel):
    """Provider status (no secrets)."""
    status: str
    provider: Optional[str] = None
