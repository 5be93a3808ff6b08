"""Chat proxy route, its body-size cap and its rate-limit dependency."""

from typing import Callable, Coroutine

from fastapi import APIRouter, Depends, Request, Response
from fastapi.routing import APIRoute

from site_assistant import RateLimitDecision
from site_assistant.exceptions import (
    AssistantError,
    MessageTooLongError,
    RateLimitError,
    UpstreamError,
)
from site_assistant.logging import get_logger
from web.models import ChatReply, ChatRequest, ErrorReply
from web.state import AppState, get_app_state

logger = get_logger("web.chat")


async def read_capped_body(request: Request, limit: int) -> bytes:
    """
    Read the request body, stopping as soon as it passes ``limit`` bytes.

    A declared ``Content-Length`` over the limit is rejected without reading;
    chunked bodies are counted as they arrive.

    Raises:
        MessageTooLongError: The body is larger than ``limit``.
    """
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > limit:
        raise MessageTooLongError("Request body too large", size=int(content_length), limit=limit)

    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise MessageTooLongError("Request body too large", size=size, limit=limit)
        chunks.append(chunk)

    body = b"".join(chunks)
    # Starlette's body cache; request.body() and request.json() read from it
    request._body = body
    return body


class BodyLimitRoute(APIRoute):
    """Route that caps the request body before FastAPI parses it."""

    def get_route_handler(self) -> Callable[[Request], Coroutine]:
        handler = super().get_route_handler()

        async def capped_handler(request: Request) -> Response:
            limit = get_app_state(request).settings.web.max_body_bytes
            await read_capped_body(request, limit)
            return await handler(request)

        return capped_handler


router = APIRouter(prefix="/api", tags=["chat"], route_class=BodyLimitRoute)


def client_key(request: Request) -> str:
    """Caller identity used for rate limiting."""
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(
    request: Request,
    response: Response,
    state: AppState = Depends(get_app_state),
) -> RateLimitDecision:
    """Count the request against the caller's window; reject once it is spent."""
    key = client_key(request)
    decision = state.limiter.hit(key)
    # Error responses pick these up in the exception handler.
    request.state.rate_limit = decision
    if not decision.allowed:
        raise RateLimitError("Rate limit exceeded", caller=key, retry_after=decision.reset_after)
    response.headers.update(decision.headers())
    return decision


@router.post(
    "/chat",
    response_model=ChatReply,
    responses={
        400: {"model": ErrorReply},
        413: {"model": ErrorReply},
        429: {"model": ErrorReply},
        500: {"model": ErrorReply},
        502: {"model": ErrorReply},
        503: {"model": ErrorReply},
        504: {"model": ErrorReply},
    },
)
async def chat(
    payload: ChatRequest,
    request: Request,
    state: AppState = Depends(get_app_state),
    _: RateLimitDecision = Depends(enforce_rate_limit),
) -> ChatReply:
    """Relay one message to the AI provider and return its reply."""
    try:
        reply = await state.assistant.reply(payload.message)
    except AssistantError:
        raise
    except Exception as e:
        raise UpstreamError(f"Unexpected failure: {e!r}") from e

    logger.info("Chat reply sent", caller=client_key(request), length=len(reply))
    return ChatReply(reply=reply)
