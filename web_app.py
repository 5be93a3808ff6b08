"""
JV Solutions website - Main FastAPI Application

Serves the marketing page, its static assets and the ``/api/chat`` proxy
that relays visitor questions to the configured AI provider.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from site_assistant import (
    AssistantError,
    ChatAssistant,
    FixedWindowRateLimiter,
    MessageRequiredError,
    build_provider,
    configure_logging,
    get_logger,
)
from site_assistant.config import FALLBACK_REPLIES, Settings, get_settings
from web.chat import router as chat_router
from web.models import StatusReply
from web.state import AppState, get_app_state

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "web" / "templates"
STATIC_DIR = BASE_DIR / "web" / "static"

logger = get_logger("web")
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# ============================================================================
# Error Handlers
# ============================================================================

async def handle_assistant_error(request: Request, exc: AssistantError) -> JSONResponse:
    """Map an AssistantError to its fixed status and message."""
    if exc.status_code >= 500:
        logger.error("Chat request failed", status=exc.status_code, error=str(exc))
    else:
        logger.warn("Chat request rejected", status=exc.status_code, error=str(exc))

    headers = {}
    decision = getattr(request.state, "rate_limit", None)
    if decision is not None:
        headers.update(decision.headers())
    return JSONResponse(exc.to_payload(), status_code=exc.status_code, headers=headers)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable bodies and non-string messages count as a missing message."""
    return await handle_assistant_error(request, MessageRequiredError("Invalid request body", errors=len(exc.errors())))


# ============================================================================
# Application Factory
# ============================================================================

def create_app(
    settings: Optional[Settings] = None,
    assistant: Optional[ChatAssistant] = None,
    limiter: Optional[FixedWindowRateLimiter] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Resolved configuration (defaults to the global settings).
        assistant: Chat core; built from ``settings`` when omitted.
        limiter: Per-caller rate limiter; built from ``settings`` when omitted.
    """
    settings = settings or get_settings()
    configure_logging(settings.log.level, settings.log.json_format)

    if assistant is None:
        assistant = ChatAssistant(build_provider(settings), settings.chat)
    if limiter is None:
        limiter = FixedWindowRateLimiter(
            max_requests=settings.chat.rate_limit_max,
            window_seconds=settings.chat.rate_limit_window,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown lifecycle."""
        logger.info(
            "JV Solutions server starting",
            port=settings.web.port,
            provider=assistant.provider.name if assistant.provider else None,
        )
        yield
        logger.info("JV Solutions server stopped")

    app = FastAPI(title="JV Solutions", version="0.1.0", debug=settings.web.debug, lifespan=lifespan)
    app.state.site = AppState(settings=settings, assistant=assistant, limiter=limiter)

    app.add_exception_handler(AssistantError, handle_assistant_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    # ------------------------------------------------------------------
    # Page Routes
    # ------------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def read_root(request: Request):
        """Serve the landing page."""
        return templates.TemplateResponse(
            request,
            "index.html",
            {"fallback_replies": list(FALLBACK_REPLIES)},
        )

    # ------------------------------------------------------------------
    # Status API
    # ------------------------------------------------------------------

    @app.get("/api/status", response_model=StatusReply)
    async def check_status(request: Request) -> StatusReply:
        """Report which AI provider is configured."""
        state = get_app_state(request)
        provider = state.assistant.provider
        return StatusReply(
            status="ok" if provider else "unconfigured",
            provider=provider.name if provider else None,
        )

    app.include_router(chat_router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    return app


app = create_app()


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    current = get_settings()
    uvicorn.run(app, host=current.web.host, port=current.web.port)
