"""
Exception hierarchy for the site assistant.

Every failure the chat proxy can report is an ``AssistantError`` subclass
carrying the HTTP status and the fixed, user-facing message returned to the
browser. Internal detail (provider error text, upstream status codes) lives
in ``context`` and is only ever logged.

Usage:
    from site_assistant.exceptions import UpstreamError

    raise UpstreamError("OpenAI error", status=401)
"""

from typing import Any


class AssistantError(Exception):
    """
    Base exception for all site assistant errors.

    Attributes:
        status_code: HTTP status the proxy responds with
        user_message: Message shown to the caller in the ``error`` field
        context: Additional context for debugging (never sent to callers)
    """

    status_code: int = 500
    user_message: str = "Unable to reach the AI service right now."

    def __init__(self, message: str = "", **context: Any):
        super().__init__(message or self.user_message)
        self.context = context

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{base} ({ctx_str})"
        return base

    def to_payload(self) -> dict[str, str]:
        """Body returned to the client."""
        return {"error": self.user_message}


# ============================================================================
# Request Errors
# ============================================================================

class ValidationError(AssistantError):
    """Base class for rejected chat messages."""
    status_code = 400
    user_message = "Message is required."


class MessageRequiredError(ValidationError):
    """Message missing, not a string, or blank after trimming."""
    status_code = 400
    user_message = "Message is required."


class MessageTooLongError(ValidationError):
    """Message (or request body) exceeds the accepted size."""
    status_code = 413
    user_message = "Message is too long."


class RateLimitError(AssistantError):
    """
    Caller exceeded the per-window request budget.

    Use the retry_after context value for the ``Retry-After`` header.
    """
    status_code = 429
    user_message = "Too many requests. Please try again shortly."

    @property
    def retry_after(self) -> float:
        """Suggested wait time in seconds."""
        return self.context.get("retry_after", 1.0)


# ============================================================================
# Provider Errors
# ============================================================================

class ConfigurationError(AssistantError):
    """No usable provider credentials were configured."""
    status_code = 503
    user_message = "The AI service is not configured."


class UpstreamError(AssistantError):
    """
    The provider could not be reached or answered with a non-2xx status.
    """
    status_code = 500
    user_message = "Unable to reach the AI service right now."


class UpstreamTimeoutError(UpstreamError):
    """The provider did not answer before the request deadline."""
    status_code = 504
    user_message = "The AI service timed out. Please try again."


class EmptyReplyError(UpstreamError):
    """The provider answered but the completion text was empty."""
    status_code = 502
    user_message = "No reply received from AI service."


# ============================================================================
# Utility Functions
# ============================================================================

def get_status_code(error: Exception) -> int:
    """
    Get the HTTP status for an exception.

    Args:
        error: The exception

    Returns:
        The error's status for AssistantErrors, 500 otherwise
    """
    if isinstance(error, AssistantError):
        return error.status_code
    return AssistantError.status_code


def get_user_message(error: Exception) -> str:
    """
    Get the client-facing message for an exception.

    Unknown exceptions collapse to the generic upstream message so no
    internal detail leaks to callers.
    """
    if isinstance(error, AssistantError):
        return error.user_message
    return AssistantError.user_message
