"""
Unit tests for the chat widget controller.
"""
import json
import random

import httpx
import pytest

from site_assistant import ChatAssistant, FixedWindowRateLimiter
from site_assistant.config import FALLBACK_REPLIES, THINKING_PLACEHOLDER
from site_assistant.widget import ChatWidget, WidgetState


def make_widget(handler, **kwargs) -> ChatWidget:
    return ChatWidget(
        endpoint="http://testserver/api/chat",
        transport=httpx.MockTransport(handler),
        rng=random.Random(7),
        **kwargs,
    )


def reply_handler(captured: list, status: int = 200, body=None):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)
    return handler


class TestPanel:

    def test_starts_closed(self):
        widget = ChatWidget()

        assert widget.state is WidgetState.CLOSED
        assert not widget.is_open
        assert widget.transcript == []

    def test_open_focuses_input(self):
        widget = ChatWidget()
        widget.open()

        assert widget.is_open
        assert widget.input_focused

    def test_close(self):
        widget = ChatWidget()
        widget.open()
        widget.close()

        assert widget.state is WidgetState.CLOSED
        assert not widget.input_focused


class TestSubmit:

    @pytest.mark.asyncio
    async def test_reply_replaces_placeholder(self):
        captured = []
        widget = make_widget(reply_handler(captured, body={"reply": "We offer cloud planning."}))

        entry = await widget.submit("  What services do you offer?  ")

        assert [(e.role, e.text) for e in widget.transcript] == [
            ("user", "What services do you offer?"),
            ("bot", "We offer cloud planning."),
        ]
        assert entry is widget.transcript[-1]
        assert entry.text != THINKING_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_request_body(self):
        captured = []
        widget = make_widget(reply_handler(captured, body={"reply": "ok"}))

        await widget.submit("Hello")

        assert len(captured) == 1
        request = captured[0]
        assert request.method == "POST"
        assert str(request.url) == "http://testserver/api/chat"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"message": "Hello"}

    @pytest.mark.asyncio
    async def test_placeholder_shown_while_waiting(self):
        seen = []

        def handler(request):
            seen.append([(e.role, e.text) for e in widget.transcript])
            return httpx.Response(200, json={"reply": "ok"})

        widget = make_widget(handler)
        await widget.submit("Hello")

        assert seen == [[("user", "Hello"), ("bot", THINKING_PLACEHOLDER)]]

    @pytest.mark.asyncio
    async def test_uses_and_clears_input_value(self):
        captured = []
        widget = make_widget(reply_handler(captured, body={"reply": "ok"}))
        widget.input_value = "From the box"

        await widget.submit()

        assert widget.input_value == ""
        assert json.loads(captured[0].content) == {"message": "From the box"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_ignored(self, text):
        captured = []
        widget = make_widget(reply_handler(captured, body={"reply": "ok"}))

        assert await widget.submit(text) is None
        assert widget.transcript == []
        assert captured == []

    @pytest.mark.asyncio
    async def test_entries_settle(self):
        widget = make_widget(reply_handler([], body={"reply": "ok"}))

        entry = await widget.submit("Hello")

        assert all(e.new for e in widget.transcript)
        entry.settle()
        assert not entry.new


class TestFallback:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,body", [
        (500, {"error": "Unable to reach the AI service right now."}),
        (429, {"error": "Too many requests. Please try again shortly."}),
        (200, b"<html>not json</html>"),
        (200, {"reply": ""}),
        (200, {"reply": "   "}),
        (200, {"something": "else"}),
        (200, ["reply"]),
    ])
    async def test_fallback_reply(self, status, body):
        widget = make_widget(reply_handler([], status=status, body=body))

        entry = await widget.submit("Hello")

        assert entry.text in FALLBACK_REPLIES
        assert len(widget.transcript) == 2

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        widget = make_widget(handler)

        entry = await widget.submit("Hello")

        assert entry.text in FALLBACK_REPLIES

    @pytest.mark.asyncio
    async def test_malformed_endpoint(self):
        captured = []
        widget = ChatWidget(
            endpoint="http://testserver:notaport/api/chat",
            transport=httpx.MockTransport(reply_handler(captured, body={"reply": "ok"})),
        )

        entry = await widget.submit("Hello")

        assert entry.text in FALLBACK_REPLIES
        assert captured == []

    def test_fallback_choice_is_from_list(self):
        widget = ChatWidget(rng=random.Random(0))

        picks = {widget.fallback_reply() for _ in range(50)}

        assert picks <= set(FALLBACK_REPLIES)
        assert len(picks) > 1


class TestAgainstApp:

    @pytest.mark.asyncio
    async def test_round_trip(self, settings, fake_provider):
        from web_app import create_app

        app = create_app(
            settings=settings,
            assistant=ChatAssistant(fake_provider, settings.chat),
            limiter=FixedWindowRateLimiter(max_requests=20, window_seconds=60),
        )
        widget = ChatWidget(
            endpoint="http://testserver/api/chat",
            transport=httpx.ASGITransport(app=app),
        )

        entry = await widget.submit("What services do you offer?")

        assert entry.text == "Hello there."
        assert fake_provider.calls[0][1] == "What services do you offer?"

    @pytest.mark.asyncio
    async def test_unconfigured_app_gives_fallback(self, settings):
        from web_app import create_app

        app = create_app(settings=settings, assistant=ChatAssistant(None, settings.chat))
        widget = ChatWidget(
            endpoint="http://testserver/api/chat",
            transport=httpx.ASGITransport(app=app),
        )

        entry = await widget.submit("Hello")

        assert entry.text in FALLBACK_REPLIES
